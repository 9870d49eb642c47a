"""Tests for TOML settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from goapplan.config import PlannerSettings, load_settings

SAMPLE_TOML = """
[planner]
max_expansions = 500

[logging]
level = "DEBUG"
json = false
"""


def test_load_settings_from_path(tmp_path: Path) -> None:
    """Loading from disk produces validated settings."""
    config_path = tmp_path / "goapplan.toml"
    config_path.write_text(SAMPLE_TOML)

    settings = load_settings(path=config_path)

    assert isinstance(settings, PlannerSettings)
    assert settings.max_expansions == 500
    assert settings.log_level == "DEBUG"
    assert settings.json_logs is False


def test_load_settings_defaults_for_empty_document() -> None:
    """An empty document leaves the search unbounded."""
    settings = load_settings(data="")

    assert settings.max_expansions is None
    assert settings.log_level == "INFO"
    assert settings.json_logs is True


def test_load_settings_with_overrides() -> None:
    """Overrides merge into the parsed tables."""
    settings = load_settings(
        data=SAMPLE_TOML,
        overrides={"planner": {"max_expansions": 10}},
    )

    assert settings.max_expansions == 10
    assert settings.log_level == "DEBUG"


def test_invalid_settings_raise_validation_error() -> None:
    """Invalid values surface as ValidationError."""
    with pytest.raises(ValidationError):
        load_settings(data=SAMPLE_TOML.replace("500", "0"))


def test_load_settings_requires_exactly_one_source(tmp_path: Path) -> None:
    """Path and data are mutually exclusive."""
    with pytest.raises(ValueError, match="exactly one"):
        load_settings()

    with pytest.raises(ValueError, match="exactly one"):
        load_settings(path=tmp_path / "x.toml", data="")


def test_missing_settings_file_raises(tmp_path: Path) -> None:
    """Referencing a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_settings(path=tmp_path / "missing.toml")


def test_directory_settings_path_raises_value_error(tmp_path: Path) -> None:
    """A directory provided as settings path raises a ValueError."""
    with pytest.raises(ValueError, match="not a file"):
        load_settings(path=tmp_path)


def test_non_table_section_raises_value_error() -> None:
    """Sections that are not TOML tables are rejected as invalid settings."""
    with pytest.raises(ValueError, match=r"\[planner\] must be a table"):
        load_settings(data="planner = 3\n")

    with pytest.raises(ValueError, match=r"\[logging\] must be a table"):
        load_settings(data='logging = "DEBUG"\n')
