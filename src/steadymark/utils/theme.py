"""Textual theme for the steadymark viewer."""

from __future__ import annotations

from textual.theme import Theme

THEME_NAME = "steadymark"

bg_0 = "#282828"
bg_1 = "#3C3836"
bg_2 = "#504945"

fg_0 = "#FBF1C7"
fg_1 = "#EBDBB2"
fg_dim = "#A89984"

red = "#FB4934"
green = "#B8BB26"
yellow = "#FABD2F"
blue = "#83A598"
aqua = "#8EC07C"
orange = "#FE8019"


def streaming_variables() -> dict[str, str]:
    """CSS variables used to mark the block that is still growing."""
    return {
        "streaming-border": fg_dim,
        "streaming-foreground": fg_0,
    }


def create_steadymark_theme() -> Theme:
    """Create the steadymark color theme, a muted Gruvbox variant."""
    return Theme(
        name=THEME_NAME,
        primary=blue,
        secondary=aqua,
        accent=orange,
        foreground=fg_1,
        background=bg_0,
        success=green,
        warning=yellow,
        error=red,
        surface=bg_1,
        panel=bg_2,
        dark=True,
        variables=streaming_variables(),
    )
