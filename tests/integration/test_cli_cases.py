"""Integration tests running planning cases through the Typer CLI."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from goapplan.cli import app

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@pytest.mark.integration
def test_check_runs_every_fixture_case() -> None:
    """All bundled planning cases match their expected plans."""
    result = CliRunner().invoke(app, ["check", str(DATA_DIR)])

    assert result.exit_code == 0, result.output
    assert "dog.json: ok" in result.output
    assert "6/6 cases passed" in result.output


@pytest.mark.integration
def test_check_fails_on_mismatched_expectation(tmp_path: Path) -> None:
    """A case whose expectation is wrong makes the command fail."""
    shutil.copy(DATA_DIR / "dog.json", tmp_path / "dog.json")
    broken = json.loads((DATA_DIR / "cheaper_detour.json").read_text(encoding="utf-8"))
    broken["expected_actions"] = ["collect_branches"]
    (tmp_path / "broken.json").write_text(json.dumps(broken), encoding="utf-8")

    result = CliRunner().invoke(app, ["check", str(tmp_path)])

    assert result.exit_code == 1
    assert "broken.json: FAILED" in result.output
    assert "1/2 cases passed" in result.output


@pytest.mark.integration
def test_plan_case_file_writes_json_result() -> None:
    """Planning a case file prints and persists the resulting plan."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(
            app,
            [
                "plan",
                "--case",
                str(DATA_DIR / "dog.json"),
                "--log-level",
                "WARNING",
                "--json-out",
                "result.json",
            ],
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(Path("result.json").read_text(encoding="utf-8"))

    assert payload["status"] == "ok"
    assert payload["actions"] == ["walk_to_dog", "pet_dog", "dog_wiggles_tail"]
    assert payload["total_cost"] == 3
