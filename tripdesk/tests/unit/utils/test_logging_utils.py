from __future__ import annotations

import logging

import pytest

from tripdesk.utils.logging import (
    DEBUG_ENV_VAR,
    LEVEL_ENV_VAR,
    apply_gui_preferences,
    configure_root,
    env_level,
    env_requests_debug,
)


@pytest.fixture(autouse=True)
def _restore_levels(monkeypatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)
    root = logging.getLogger()
    urllib3 = logging.getLogger("urllib3")
    saved = (root.level, urllib3.level)
    yield
    root.setLevel(saved[0])
    urllib3.setLevel(saved[1])


def test_env_level_precedence() -> None:
    assert env_level({}) is None
    assert env_level({DEBUG_ENV_VAR: "yes"}) == logging.DEBUG
    assert env_level({DEBUG_ENV_VAR: "0"}) is None
    assert env_level({LEVEL_ENV_VAR: "warning", DEBUG_ENV_VAR: "1"}) == logging.WARNING
    assert env_level({LEVEL_ENV_VAR: "15"}) == 15
    assert env_level({LEVEL_ENV_VAR: "chatty"}) == logging.INFO


def test_gui_preference_toggles_root_and_quiets_libraries() -> None:
    assert apply_gui_preferences(True) == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.DEBUG

    assert apply_gui_preferences(False) == logging.INFO
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_environment_overrides_gui_preference(monkeypatch) -> None:
    monkeypatch.setenv(LEVEL_ENV_VAR, "ERROR")
    assert apply_gui_preferences(True) == logging.ERROR
    assert env_requests_debug() is False

    monkeypatch.setenv(LEVEL_ENV_VAR, "DEBUG")
    assert env_requests_debug() is True


def test_configure_root_uses_default_level() -> None:
    assert configure_root("warning") == logging.WARNING
    assert logging.getLogger().level == logging.WARNING
