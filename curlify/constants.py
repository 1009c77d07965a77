from __future__ import annotations

dryRun: bool = False

# Straight marks, as found in source text.
straightDouble = '"'
straightSingle = "'"

# Directional marks, as produced.
openDouble = "“"
closeDouble = "”"
openSingle = "‘"
closeSingle = "’"

# Lines of exactly three hyphens delimit front matter.
frontMatterFence = "---"
codeFence = "```"
