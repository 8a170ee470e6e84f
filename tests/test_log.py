"""Tests for dcterm.log."""

import logging

import pytest

from dcterm.log import coerce_level, configure_root


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("DCTERM_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DCTERM_DEBUG", raising=False)
    root = logging.getLogger()
    level = root.level
    yield monkeypatch
    root.setLevel(level)


class TestCoerceLevel:
    @pytest.mark.parametrize("value, expected", [
        ("debug", logging.DEBUG), ("INFO", logging.INFO), ("30", 30), ("", logging.ERROR),
        ("nonsense", logging.ERROR), (None, logging.ERROR),
    ])
    def test_values(self, value, expected):
        assert coerce_level(value, logging.ERROR) == expected


class TestConfigureRoot:
    def test_default(self, clean_env):
        assert configure_root("INFO") == logging.INFO
        assert logging.getLogger().level == logging.INFO

    def test_env_level_wins(self, clean_env):
        clean_env.setenv("DCTERM_LOG_LEVEL", "error")
        assert configure_root(logging.DEBUG) == logging.ERROR

    def test_debug_flag(self, clean_env):
        clean_env.setenv("DCTERM_DEBUG", "yes")
        assert configure_root() == logging.DEBUG
