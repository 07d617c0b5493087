"""Shared utilities."""

from __future__ import annotations

from steadymark.utils.text import indent_width, is_blank, split_lines
from steadymark.utils.theme import create_steadymark_theme

__all__ = [
    "create_steadymark_theme",
    "indent_width",
    "is_blank",
    "split_lines",
]
