"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from encounter_engine.core.logging import (
    add_app_context,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture
def restore_logging():
    """Undo global logging configuration after the test."""
    root_handlers = logging.root.handlers[:]
    root_level = logging.root.level
    yield
    structlog.reset_defaults()
    clear_context()
    logging.root.handlers[:] = root_handlers
    logging.root.setLevel(root_level)


def test_add_app_context() -> None:
    event_dict = add_app_context(None, "info", {"event": "hello"})

    assert event_dict == {"event": "hello", "app": "encounter_engine"}


def test_context_binding() -> None:
    """Test bound context can be partially removed and cleared."""
    clear_context()

    bind_context(hero="Aria", enemy="Slime")
    unbind_context("enemy")

    assert structlog.contextvars.get_contextvars() == {"hero": "Aria"}

    clear_context()
    assert structlog.contextvars.get_contextvars() == {}


def test_json_output(restore_logging, capsys) -> None:
    """Test JSON lines carry the event, bound context and app name."""
    configure_logging(level="DEBUG", json_format=True)
    bind_context(hero="Aria")

    get_logger("tests").info("Attack resolved", damage=12)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    entry = json.loads(line)
    assert entry["event"] == "Attack resolved"
    assert entry["damage"] == 12
    assert entry["hero"] == "Aria"
    assert entry["app"] == "encounter_engine"
    assert entry["level"] == "info"


def test_level_filtering(restore_logging, capsys) -> None:
    configure_logging(level="WARNING", json_format=True)

    get_logger("tests").info("Quiet")

    assert capsys.readouterr().out == ""


def test_defaults_from_settings(restore_logging, capsys, monkeypatch) -> None:
    """Test unset arguments fall back to the environment settings."""
    monkeypatch.setenv("ENCOUNTER_ENGINE_LOG_JSON", "true")
    monkeypatch.setenv("ENCOUNTER_ENGINE_LOG_LEVEL", "ERROR")

    configure_logging()
    logger = get_logger("tests")
    logger.warning("Filtered")
    logger.error("Save failed", slot="default")

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event"] == "Save failed"
