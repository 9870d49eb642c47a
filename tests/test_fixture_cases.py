"""Run every bundled planning case through the library entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from goapplan.catalog import load_cases
from goapplan.planner import plan
from goapplan.schemas import PlanningCase

CASES = load_cases(Path(__file__).resolve().parent / "data")


@pytest.mark.parametrize("case", CASES, ids=[case.case_name for case in CASES])
def test_planning_case_matches_expectation(case: PlanningCase) -> None:
    """Each case's computed plan equals its recorded expectation."""
    planned = plan(case.initial_state, case.goal_state, case.actions)

    assert case.check(planned), case.describe(planned)
