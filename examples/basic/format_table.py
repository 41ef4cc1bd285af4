"""Align a Markdown table in 3 lines, with zero config and zero deps."""

from pipetable import fix_source

print(fix_source("| Name | Lang |\n|-|:-:|\n| 你好 | zh |\n| Hello | en |"))
