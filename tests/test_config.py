"""Tests for configuration loading and sandboxing."""

from pathlib import Path

from steadymark.config import (
    MarkdownTheme,
    StreamdownConfig,
    get_config_path,
    get_init_script_path,
    load_config,
)


class TestStreamdownConfig:
    def test_defaults(self):
        c = StreamdownConfig()
        assert c.parse_incomplete_markdown is True
        assert c.complete_links is False
        assert c.min_interval == 1.0 / 30.0
        assert c.theme == MarkdownTheme()

    def test_custom_settings(self):
        c = StreamdownConfig()
        c.set("my_key", "my_value")
        assert c.get("my_key") == "my_value"
        assert c.get("missing", "default") == "default"

    def test_theme_rich_kwargs(self):
        theme = MarkdownTheme(code_theme="github-dark", hyperlinks=False)
        kwargs = theme.rich_kwargs()
        assert kwargs["code_theme"] == "github-dark"
        assert kwargs["hyperlinks"] is False
        assert kwargs["inline_code_theme"] is None
        assert kwargs["justify"] is None


class TestConfigPaths:
    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "steadymark"
        assert get_init_script_path() == tmp_path / "steadymark" / "init.py"

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_config_path() == Path.home() / ".config" / "steadymark"


class TestLoadConfig:
    def test_no_config_file(self, monkeypatch, tmp_path):
        """When no init.py exists, should return defaults with no error."""
        monkeypatch.setattr(
            "steadymark.config.get_init_script_path", lambda: tmp_path / "init.py"
        )
        config, error = load_config()
        assert error is None
        assert config.parse_incomplete_markdown is True

    def test_valid_config(self, tmp_config_dir):
        (tmp_config_dir / "init.py").write_text(
            "config.complete_links = True\n"
            "config.min_interval = 0.05\n"
            'config.theme.code_theme = "dracula"\n'
        )
        config, error = load_config()
        assert error is None
        assert config.complete_links is True
        assert config.min_interval == 0.05
        assert config.theme.code_theme == "dracula"

    def test_sandbox_blocks_import(self, monkeypatch, tmp_path):
        """The sandbox should prevent __import__ calls."""
        init_file = tmp_path / "init.py"
        init_file.write_text("import os\n")
        monkeypatch.setattr("steadymark.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None
        assert "Error" in error

    def test_sandbox_blocks_open(self, monkeypatch, tmp_path):
        init_file = tmp_path / "init.py"
        init_file.write_text("f = open('/etc/passwd')\n")
        monkeypatch.setattr("steadymark.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None

    def test_sandbox_blocks_eval(self, monkeypatch, tmp_path):
        init_file = tmp_path / "init.py"
        init_file.write_text("eval('1+1')\n")
        monkeypatch.setattr("steadymark.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None

    def test_sandbox_allows_basic_types(self, monkeypatch, tmp_path):
        """Basic Python types should work in the sandbox."""
        init_file = tmp_path / "init.py"
        init_file.write_text(
            'x = str(42)\n'
            'y = list(range(3))\n'
            'config.set("x", x)\n'
            'config.set("y", y)\n'
        )
        monkeypatch.setattr("steadymark.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is None
        assert config.get("x") == "42"
        assert config.get("y") == [0, 1, 2]

    def test_settings_before_error_are_kept(self, monkeypatch, tmp_path):
        init_file = tmp_path / "init.py"
        init_file.write_text("config.complete_links = True\nundefined_name\n")
        monkeypatch.setattr("steadymark.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert "NameError" in error
        assert config.complete_links is True

    def test_syntax_error_in_config(self, monkeypatch, tmp_path):
        init_file = tmp_path / "init.py"
        init_file.write_text("def f(:\n")
        monkeypatch.setattr("steadymark.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None
        assert "SyntaxError" in error
