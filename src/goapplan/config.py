"""Configuration loading utilities for goapplan."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["PlannerSettings", "load_settings"]


class PlannerSettings(BaseModel):
    """Settings shared by the CLI and library callers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_expansions: int | None = Field(default=None, ge=1)
    log_level: str = "INFO"
    json_logs: bool = True


def load_settings(
    *,
    path: Path | str | None = None,
    data: str | bytes | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> PlannerSettings:
    """Load and validate settings from TOML data.

    Exactly one of ``path`` or ``data`` must be provided. ``overrides`` is
    merged into the parsed tables before validation, e.g. for CLI flags.
    """
    if (path is None) == (data is None):
        msg = "Provide exactly one of 'path' or 'data' when loading settings."
        raise ValueError(msg)

    raw_content: dict[str, Any]
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        if not path.is_file():
            msg = f"Settings path is not a file: {path}"
            raise ValueError(msg)
        raw_content = tomllib.loads(path.read_text(encoding="utf-8"))
    else:
        text = data if isinstance(data, str) else cast("bytes", data).decode()
        raw_content = tomllib.loads(text)

    if overrides is not None:
        typed_overrides = {str(key): value for key, value in overrides.items()}
        raw_content = _merge_dicts(dict(raw_content), typed_overrides)

    return PlannerSettings.model_validate(_normalise(raw_content))


def _merge_dicts(base: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if key in base and isinstance(base[key], Mapping) and isinstance(value, Mapping):
            nested_base = cast("dict[str, Any]", dict(base[key]))
            base[key] = _merge_dicts(nested_base, cast("Mapping[str, Any]", value))
        else:
            base[key] = value
    return base


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, Mapping):
        msg = f"Settings section [{name}] must be a table."
        raise ValueError(msg)
    return cast("Mapping[str, Any]", section)


def _normalise(raw: Mapping[str, Any]) -> dict[str, Any]:
    planner = _section(raw, "planner")
    logging_section = _section(raw, "logging")

    settings: dict[str, Any] = {
        "max_expansions": planner.get("max_expansions", raw.get("max_expansions")),
        "log_level": logging_section.get("level", raw.get("log_level", "INFO")),
        "json_logs": logging_section.get("json", raw.get("json_logs", True)),
    }
    return settings
