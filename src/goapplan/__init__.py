"""Goal-oriented action planning over boolean world states."""

from __future__ import annotations

from goapplan.models import WorldState
from goapplan.planner import explain, plan
from goapplan.schemas import ActionSchema, PlanResult

__all__ = ["ActionSchema", "PlanResult", "WorldState", "explain", "plan"]

__version__ = "0.1.0"
