"""Tests for logging configuration utilities."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from goapplan.logging import StructuredFormatter, TextFormatter, configure_logging

if TYPE_CHECKING:
    from collections.abc import Iterator


def _record() -> logging.LogRecord:
    record = logging.LogRecord(
        name="goapplan.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Planned %s",
        args=("dog",),
        exc_info=None,
    )
    record.event = "plan_found"
    record.actions = ["walk_to_dog"]
    return record


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    """Restore root handlers and level after the test reconfigures logging."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    for handler in original_handlers:
        root.removeHandler(handler)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        root.addHandler(handler)
    root.setLevel(original_level)


def test_structured_formatter_renders_json_payload() -> None:
    """StructuredFormatter includes extras and basic fields."""
    payload = json.loads(StructuredFormatter().format(_record()))

    assert payload["message"] == "Planned dog"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "goapplan.test"
    assert payload["event"] == "plan_found"
    assert payload["actions"] == ["walk_to_dog"]
    assert "lineno" not in payload


def test_text_formatter_appends_extras() -> None:
    """TextFormatter renders extras as sorted key=value pairs."""
    line = TextFormatter().format(_record())

    assert "INFO    goapplan.test: Planned dog" in line
    assert line.endswith('| actions=["walk_to_dog"] event="plan_found"')


@pytest.mark.parametrize(
    ("json_mode", "formatter_type"),
    [(True, StructuredFormatter), (False, TextFormatter)],
)
def test_configure_logging_installs_formatter(
    restore_root_logger: logging.Logger,
    json_mode: bool,
    formatter_type: type[logging.Formatter],
) -> None:
    """configure_logging replaces root handlers with the requested formatter."""
    configure_logging("debug", json_mode=json_mode)

    assert restore_root_logger.level == logging.DEBUG
    assert any(
        isinstance(handler.formatter, formatter_type)
        for handler in restore_root_logger.handlers
    )
