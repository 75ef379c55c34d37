"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Unit tests for logging configuration helper.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from dashlib import logging_config


@pytest.fixture(autouse=True)
def _reset_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    _reset_configured: Function description.
    :param monkeypatch:
    :returns:
    """

    monkeypatch.setattr(logging_config, "_CONFIGURED", False)


@pytest.fixture
def basic_config_calls(
    monkeypatch: pytest.MonkeyPatch,
) -> list[Dict[str, Any]]:
    calls: list[Dict[str, Any]] = []

    def fake_basic_config(**kwargs: Any) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(logging_config.logging, "basicConfig", fake_basic_config)
    return calls


def test_read_level_invalid_returns_none() -> None:
    assert logging_config._read_level("not-an-int") is None


def test_map_level_thresholds() -> None:
    assert logging_config._map_level(1) == logging_config.logging.INFO
    assert logging_config._map_level(2) == logging_config.logging.DEBUG


def test_configure_logging_silent_mode_skips_basic_config(
    monkeypatch: pytest.MonkeyPatch,
    basic_config_calls: list[Dict[str, Any]],
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "0")

    logging_config.configure_logging()

    assert basic_config_calls == []


def test_configure_logging_defaults_to_stderr_once(
    monkeypatch: pytest.MonkeyPatch,
    basic_config_calls: list[Dict[str, Any]],
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "1")

    logging_config.configure_logging()
    logging_config.configure_logging()

    assert len(basic_config_calls) == 1
    assert basic_config_calls[0]["level"] == logging_config.logging.INFO
    assert basic_config_calls[0]["force"] is True
    assert "filename" not in basic_config_calls[0]


def test_configure_logging_writes_to_log_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    basic_config_calls: list[Dict[str, Any]],
) -> None:
    log_file = tmp_path / "logs" / "dashlib.log"
    monkeypatch.setenv("LOG_LEVEL", "2")
    monkeypatch.setenv("LOG_FILE", str(log_file))

    logging_config.configure_logging()

    assert log_file.parent.is_dir()
    assert basic_config_calls[0]["filename"] == log_file
    assert basic_config_calls[0]["level"] == logging_config.logging.DEBUG
