"""Pydantic schemas describing GOAP actions, plans, and planning cases."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from goapplan.models import WorldState

__all__ = ["ActionSchema", "PlanResult", "PlanningCase"]


class ActionSchema(BaseModel):
    """Declarative description of an action's contract.

    Actions are plain immutable values: the planner only reads them and
    hands the very same objects back in its result.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Unique identifier for the action")
    cost: int = Field(..., ge=0)
    pre_conditions: WorldState = Field(default_factory=WorldState)
    post_conditions: WorldState = Field(default_factory=WorldState)

    def is_applicable(self, state: WorldState) -> bool:
        """Return whether every precondition atom holds with the same value."""
        return state.satisfies(self.pre_conditions)

    def apply_effects(self, state: WorldState) -> WorldState:
        """Return the state reached once the action's postconditions are applied."""
        return state.overlay(self.post_conditions)


class PlanResult(BaseModel):
    """Outcome of a successful search."""

    model_config = ConfigDict(frozen=True)

    actions: tuple[ActionSchema, ...] = ()
    total_cost: int = 0
    expansions: int = 0

    @property
    def action_names(self) -> list[str]:
        """Return the names of the planned actions in execution order."""
        return [action.name for action in self.actions]


class PlanningCase(BaseModel):
    """Exchange record pairing planner inputs with the expected plan.

    ``expected_actions`` set to ``None`` means no plan must be found; an
    empty list means the goal already holds and the plan must be empty.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    case_name: str = ""
    actions: tuple[ActionSchema, ...] = ()
    initial_state: WorldState = Field(default_factory=WorldState)
    goal_state: WorldState = Field(default_factory=WorldState)
    expected_actions: tuple[str, ...] | None

    def check(self, planned: Sequence[ActionSchema] | None) -> bool:
        """Return whether ``planned`` matches the expectation."""
        if planned is None or self.expected_actions is None:
            return planned is None and self.expected_actions is None
        return tuple(action.name for action in planned) == self.expected_actions

    def describe(self, planned: Sequence[ActionSchema] | None) -> str:
        """Render a one-line report comparing the expectation and ``planned``."""
        expected = "no plan" if self.expected_actions is None else list(self.expected_actions)
        got = "no plan" if planned is None else [action.name for action in planned]
        status = "ok" if self.check(planned) else "FAILED"
        return f"{self.case_name}: {status} (expected {expected}, got {got})"
