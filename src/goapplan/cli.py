"""Typer-based command line interface for the GOAP planner."""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from goapplan.catalog import CatalogError, load_actions, load_case, load_cases
from goapplan.config import PlannerSettings, load_settings
from goapplan.logging import configure_logging
from goapplan.models import WorldState
from goapplan.planner import PlanningError, explain

__all__ = ["app"]


LOGGER = logging.getLogger(__name__)


class LogLevel(StrEnum):
    """Logging levels offered as CLI options."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Compute minimum-cost action plans for boolean world states.",
)


def _fail(message: str, exc: Exception) -> typer.Exit:
    typer.echo(f"{message}: {exc}", err=True)
    return typer.Exit(code=1)


def _resolve_settings(
    config: Path | None,
    *,
    max_expansions: int | None,
    log_level: LogLevel | None,
) -> PlannerSettings:
    """Merge the optional settings file with flags given on the command line."""
    overrides: dict[str, Any] = {}
    if max_expansions is not None:
        overrides["planner"] = {"max_expansions": max_expansions}
    if log_level is not None:
        overrides["logging"] = {"level": log_level.value}

    try:
        if config is not None:
            return load_settings(path=config, overrides=overrides)
        return load_settings(data="", overrides=overrides)
    except (OSError, ValueError) as exc:
        raise _fail("Unable to load settings", exc) from exc


def _parse_state(raw: str, option: str) -> WorldState:
    try:
        return WorldState.model_validate_json(raw)
    except ValidationError as exc:
        message = f"{option} must be a JSON object mapping atom names to booleans"
        raise typer.BadParameter(message, param_hint=option) from exc


def _emit_json(payload: dict[str, object], json_out: Path | None) -> None:
    """Write ``payload`` to stdout and, optionally, a JSON file."""
    text = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
    typer.echo(text)
    if json_out is None:
        return
    try:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise _fail(f"Unable to write JSON output ({json_out})", exc) from exc


@app.command("plan")
def plan_command(
    *,
    case: Annotated[
        Path | None,
        typer.Option(
            exists=True,
            dir_okay=False,
            readable=True,
            help="Planning case JSON holding actions, initial_state and goal_state.",
        ),
    ] = None,
    actions: Annotated[
        Path | None,
        typer.Option(
            exists=True,
            dir_okay=False,
            readable=True,
            help="JSON array of action records.",
        ),
    ] = None,
    initial: Annotated[
        str | None,
        typer.Option(help="Initial state as a JSON object (used with --actions)."),
    ] = None,
    goal: Annotated[
        str | None,
        typer.Option(help="Goal state as a JSON object (used with --actions)."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(exists=True, dir_okay=False, help="Optional TOML settings file."),
    ] = None,
    max_expansions: Annotated[
        int | None,
        typer.Option(min=1, help="Abort the search after this many expansions."),
    ] = None,
    json_out: Annotated[
        Path | None,
        typer.Option(help="Optional path for saving the JSON output."),
    ] = None,
    log_level: Annotated[
        LogLevel | None,
        typer.Option(help="Logging verbosity for the run.", case_sensitive=False),
    ] = None,
    text_logs: Annotated[
        bool,
        typer.Option("--text-logs", help="Log plain text lines instead of JSON."),
    ] = False,
) -> None:
    """Plan a minimum-cost action sequence and print it as JSON."""
    settings = _resolve_settings(config, max_expansions=max_expansions, log_level=log_level)
    configure_logging(
        settings.log_level,
        json_mode=settings.json_logs and not text_logs,
    )

    if (case is None) == (actions is None):
        message = "Provide exactly one of --case or --actions."
        raise typer.BadParameter(message, param_hint="--case/--actions")
    if case is not None and (initial is not None or goal is not None):
        message = "--initial and --goal cannot be combined with --case."
        raise typer.BadParameter(message, param_hint="--initial/--goal")

    try:
        if case is not None:
            planning_case = load_case(case)
            catalog = list(planning_case.actions)
            initial_state = planning_case.initial_state
            goal_state = planning_case.goal_state
        else:
            catalog = load_actions(actions).list_schemas()
            initial_state = _parse_state(initial or "{}", "--initial")
            goal_state = _parse_state(goal or "{}", "--goal")
    except (ValidationError, CatalogError, OSError, ValueError) as exc:
        raise _fail("Invalid planner input", exc) from exc

    try:
        result = explain(
            initial_state,
            goal_state,
            catalog,
            max_expansions=settings.max_expansions,
        )
    except PlanningError as exc:
        _emit_json({"status": "error", "error": str(exc)}, json_out)
        raise typer.Exit(code=1) from exc

    if result is None:
        _emit_json({"status": "no_plan"}, json_out)
        return

    _emit_json(
        {
            "status": "ok",
            "actions": result.action_names,
            "total_cost": result.total_cost,
            "expansions": result.expansions,
        },
        json_out,
    )


@app.command("check")
def check_command(
    directory: Annotated[
        Path,
        typer.Argument(exists=True, file_okay=False, help="Directory of planning case files."),
    ],
    log_level: Annotated[
        LogLevel,
        typer.Option(help="Logging verbosity for the run.", case_sensitive=False),
    ] = LogLevel.WARNING,
) -> None:
    """Run every planning case in a directory and compare with its expected plan."""
    configure_logging(log_level.value, json_mode=False)

    try:
        cases = load_cases(directory)
    except (ValidationError, CatalogError, OSError, ValueError) as exc:
        raise _fail("Invalid planning case", exc) from exc

    failures = 0
    for planning_case in cases:
        result = explain(
            planning_case.initial_state,
            planning_case.goal_state,
            planning_case.actions,
        )
        planned = None if result is None else list(result.actions)
        if not planning_case.check(planned):
            failures += 1
        typer.echo(planning_case.describe(planned))

    typer.echo(f"{len(cases) - failures}/{len(cases)} cases passed")
    if failures:
        LOGGER.warning(
            "Planning cases failed.",
            extra={"event": "check_failed", "failures": failures},
        )
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover - script entry point
    app()
