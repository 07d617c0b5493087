"""Split a streaming markdown buffer into top-level blocks.

Blocks are plain slices of the buffer: joining them gives the buffer back.
Every block except the last is treated as finished by callers, so a split is
only made where markdown's block grammar starts a new top-level block. Blank
lines stay attached to the end of the block they follow.
"""

from __future__ import annotations

import enum
import re

from steadymark.utils.fencing import FenceTracker, match_fence_open
from steadymark.utils.text import indent_width, is_blank, split_lines

_ATX_HEADING = re.compile(r"^ {0,3}#{1,6}(?:[ \t]|$)")
_THEMATIC_BREAK = re.compile(
    r"^ {0,3}(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$"
)
_SETEXT_UNDERLINE = re.compile(r"^ {0,3}(?:=+|-+)[ \t]*$")
_LIST_ITEM = re.compile(r"^[ \t]*(?:[-*+]|\d{1,9}[.)])(?:[ \t]|$)")
_BLOCK_QUOTE = re.compile(r"^ {0,3}>")
_TABLE_ROW = re.compile(r"^ {0,3}\|")

MATH_DELIMITER = "$$"

# Lines indented at least this far under a list item belong to the item.
_LIST_CONTINUATION_INDENT = 2


class BlockKind(enum.Enum):
    """Kind of top-level block, decided by the block's first line."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    FENCE = "fence"
    MATH = "math"
    LIST = "list"
    QUOTE = "quote"
    TABLE = "table"
    BREAK = "break"


# Blocks that never take further content lines after their opening unit.
_SELF_CONTAINED = frozenset(
    {BlockKind.HEADING, BlockKind.FENCE, BlockKind.MATH, BlockKind.BREAK}
)


def _opens_math(body: str) -> bool:
    """True if *body* starts a display-math block that stays open past this line."""
    stripped = body.strip()
    if not stripped.startswith(MATH_DELIMITER):
        return False
    return MATH_DELIMITER not in stripped[len(MATH_DELIMITER):]


def _is_math_line(body: str) -> bool:
    """True if *body* opens a display-math block or is one closed on the same line."""
    if _opens_math(body):
        return True
    stripped = body.strip()
    return (
        len(stripped) >= 2 * len(MATH_DELIMITER)
        and stripped.startswith(MATH_DELIMITER)
        and stripped.endswith(MATH_DELIMITER)
    )


def classify_line(body: str) -> BlockKind:
    """Classify a non-blank line (without its newline) by the block it would start."""
    if match_fence_open(body) is not None:
        return BlockKind.FENCE
    if _THEMATIC_BREAK.match(body):
        return BlockKind.BREAK
    if _ATX_HEADING.match(body):
        return BlockKind.HEADING
    if _is_math_line(body):
        return BlockKind.MATH
    if _LIST_ITEM.match(body):
        return BlockKind.LIST
    if _BLOCK_QUOTE.match(body):
        return BlockKind.QUOTE
    if _TABLE_ROW.match(body):
        return BlockKind.TABLE
    return BlockKind.PARAGRAPH


def _starts_new_block(
    kind: BlockKind, new_kind: BlockKind, body: str, after_blank: bool
) -> bool:
    """Decide whether a non-blank line ends the current block."""
    if kind in _SELF_CONTAINED:
        return True
    if kind is BlockKind.LIST and (
        new_kind is BlockKind.LIST
        or indent_width(body) >= _LIST_CONTINUATION_INDENT
    ):
        # Loose lists and indented item content stay in one block.
        return False
    if after_blank:
        return True
    if new_kind is BlockKind.PARAGRAPH or new_kind is kind:
        # Plain continuation, or lazy continuation of a list item or quote.
        return False
    if kind is BlockKind.PARAGRAPH:
        if _SETEXT_UNDERLINE.match(body):
            return False
        if new_kind is BlockKind.TABLE:
            # The paragraph's last line is the table's header row.
            return False
    return True


def _continued_kind(kind: BlockKind, new_kind: BlockKind, body: str) -> BlockKind:
    if kind is BlockKind.PARAGRAPH:
        if _SETEXT_UNDERLINE.match(body):
            return BlockKind.HEADING
        if new_kind is BlockKind.TABLE:
            return BlockKind.TABLE
    return kind


def parse_markdown_into_blocks(markdown: str) -> list[str]:
    """Partition *markdown* into top-level blocks.

    ``"".join(parse_markdown_into_blocks(text)) == text`` always holds. An
    opened fence (or ``$$`` math block) that hasn't been closed yet absorbs
    every following line, blank lines included, so a code block that is
    still streaming is never split apart. Never raises.
    """
    blocks: list[str] = []
    current: list[str] = []
    kind: BlockKind | None = None
    after_blank = False
    fences = FenceTracker()
    in_math = False

    for line in split_lines(markdown):
        if fences.in_fence:
            current.append(line)
            fences.feed(line)
            continue
        if in_math:
            current.append(line)
            if MATH_DELIMITER in line:
                in_math = False
            continue

        body = line.rstrip("\n")
        if is_blank(body):
            current.append(line)
            if kind is not None:
                after_blank = True
            continue

        new_kind = classify_line(body)
        if kind is None:
            kind = new_kind
        elif _starts_new_block(kind, new_kind, body, after_blank):
            blocks.append("".join(current))
            current = []
            kind = new_kind
        else:
            kind = _continued_kind(kind, new_kind, body)

        current.append(line)
        after_blank = False
        if fences.feed(line) is None and _opens_math(body):
            in_math = True

    if current:
        blocks.append("".join(current))
    return blocks
