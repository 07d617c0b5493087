"""Shared fixtures for steadymark tests."""

import pytest

from steadymark.config import StreamdownConfig


@pytest.fixture
def tmp_config_dir(tmp_path, monkeypatch):
    """Provide a temporary config directory and point XDG_CONFIG_HOME at it."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    config_dir = tmp_path / "config" / "steadymark"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def raw_config():
    """Config with incomplete-markdown completion turned off."""
    config = StreamdownConfig()
    config.parse_incomplete_markdown = False
    return config


@pytest.fixture
def unthrottled_config():
    """Config that renders every batch immediately."""
    config = StreamdownConfig()
    config.min_interval = 0
    return config
