"""Configuration for steadymark.

Settings are plain objects passed to the stream and the renderers when they
are built. Users can adjust the defaults from ~/.config/steadymark/init.py,
which runs in a sandbox that only exposes a ``config`` object.
"""

from __future__ import annotations

import os
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


@dataclass
class MarkdownTheme:
    """Rendering options handed to Rich/Textual markdown renderers."""

    code_theme: str = "monokai"
    inline_code_theme: Optional[str] = None
    hyperlinks: bool = True
    justify: Optional[str] = None

    def rich_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``rich.markdown.Markdown``."""
        return {
            "code_theme": self.code_theme,
            "inline_code_theme": self.inline_code_theme,
            "hyperlinks": self.hyperlinks,
            "justify": self.justify,
        }


class StreamdownConfig:
    """Configuration container for the streaming pipeline and its renderers.

    With the defaults, incomplete markdown is completed and unfinished links
    are left alone.
    """

    def __init__(self):
        # Pipeline settings
        self.parse_incomplete_markdown: bool = True
        self.complete_links: bool = False

        # Minimum seconds between re-renders while streaming (30 FPS)
        self.min_interval: float = 1.0 / 30.0

        # Display settings
        self.theme: MarkdownTheme = MarkdownTheme()

        # Custom settings (user can add any additional settings)
        self._custom: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Set a custom configuration value."""
        self._custom[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a custom configuration value."""
        return self._custom.get(key, default)


def get_config_path() -> Path:
    """Get the path to the user's config directory."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "steadymark"
    return Path.home() / ".config" / "steadymark"


def get_init_script_path() -> Path:
    """Get the path to the user's init.py script."""
    return get_config_path() / "init.py"


def load_config() -> tuple[StreamdownConfig, Optional[str]]:
    """Load configuration from ~/.config/steadymark/init.py.

    The script can set attributes on ``config`` and on ``config.theme``.

    Returns:
        A tuple of (config, error_message). If loading fails, error_message
        contains the traceback and config keeps whatever was set before the
        failure.
    """
    config = StreamdownConfig()
    init_path = get_init_script_path()

    if not init_path.exists():
        return config, None

    sandbox = {
        "__builtins__": {
            "True": True,
            "False": False,
            "None": None,
            "str": str,
            "int": int,
            "float": float,
            "bool": bool,
            "list": list,
            "dict": dict,
            "tuple": tuple,
            "len": len,
            "range": range,
            "print": print,
            # Explicitly deny dangerous operations
            "__import__": None,
            "open": None,
            "exec": None,
            "eval": None,
            "compile": None,
        },
        "config": config,
    }

    try:
        code = init_path.read_text()
        exec(code, sandbox)
        return config, None
    except Exception:
        error_msg = f"Error loading config from {init_path}:\n{traceback.format_exc()}"
        return config, error_msg
