"""Allow ``python -m pipetable``."""

import sys

from pipetable.cli import main

sys.exit(main())
