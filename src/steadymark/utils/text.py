"""Text helpers shared by the segmenter and the completer."""

from __future__ import annotations


def split_lines(text: str) -> list[str]:
    """Split *text* into lines, keeping each line's trailing ``\\n``.

    Only ``\\n`` separates lines. The last line keeps no terminator if the
    text doesn't end with one, so ``"".join(split_lines(text)) == text``.
    """
    lines = text.split("\n")
    result = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        result.append(lines[-1])
    return result


def is_blank(line: str) -> bool:
    return not line.strip()


def indent_width(line: str) -> int:
    """Width of the leading whitespace, counting a tab as four columns."""
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4 - width % 4
        else:
            break
    return width
