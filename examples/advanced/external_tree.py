"""Feed a table tree produced elsewhere (as JSON) to the patch generator."""

from pipetable import apply_patches, generate_patches, parse
from pipetable.serialization import from_json, to_json

source = "> | a | b |\n> |-|-|\n> | 1 | 22 |"

# Any parser can hand over its tree, as long as offsets point into `source`
payload = to_json(parse(source))
table = from_json(payload).children[0]

patches = generate_patches(table, source)
for patch in patches:
    print(patch.edit_range, repr(patch.replacement))

print(apply_patches(source, patches))
