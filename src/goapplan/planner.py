"""A* search over boolean world states."""

from __future__ import annotations

import logging
from heapq import heappop, heappush
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from goapplan.models import WorldState, coerce_state
from goapplan.schemas import ActionSchema, PlanResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from goapplan.models import StateLike

__all__ = [
    "FrontierEntry",
    "GoalDefinition",
    "PlanNode",
    "PlannerEngine",
    "PlanningError",
    "SearchBudgetExceededError",
    "SearchContext",
    "expand",
    "explain",
    "extract_plan",
    "mismatch_count",
    "plan",
]


_LOGGER = logging.getLogger(__name__)


class PlanningError(RuntimeError):
    """Base exception raised when a search cannot run to completion."""


class SearchBudgetExceededError(PlanningError):
    """Raised when the search expands more nodes than the caller allowed."""

    def __init__(self, max_expansions: int) -> None:
        """Store the exhausted expansion budget."""
        super().__init__(f"Search exceeded the budget of {max_expansions} expansions.")
        self.max_expansions = max_expansions


class PlanNode(BaseModel):
    """A world state together with the action that produced it."""

    model_config = ConfigDict(frozen=True)

    state: WorldState
    action: ActionSchema | None = None

    @classmethod
    def initial(cls, state: WorldState) -> PlanNode:
        """Build the start node, which has no incoming action."""
        return cls(state=state)

    def child(self, action: ActionSchema) -> PlanNode:
        """Build the node reached by applying ``action`` to this node."""
        return PlanNode(state=action.apply_effects(self.state), action=action)


def expand(node: PlanNode, actions: Iterable[ActionSchema]) -> list[tuple[PlanNode, int]]:
    """Return every successor of ``node`` with the cost of reaching it.

    Actions are visited in catalog order. Unknown atoms never satisfy a
    precondition.
    """
    return [
        (node.child(action), action.cost)
        for action in actions
        if action.is_applicable(node.state)
    ]


def mismatch_count(node: PlanNode, target: WorldState) -> int:
    """Count atoms of ``target`` the node's state lacks or contradicts."""
    return node.state.mismatch_count(target)


class GoalDefinition(BaseModel):
    """Partial target state with its heuristic and goal test."""

    model_config = ConfigDict(frozen=True)

    target: WorldState

    def is_satisfied(self, node: PlanNode) -> bool:
        """Return whether the node's state matches every goal atom."""
        return mismatch_count(node, self.target) == 0

    def heuristic(self, node: PlanNode) -> int:
        """Return the number of goal atoms still unmet."""
        return mismatch_count(node, self.target)


class FrontierEntry(BaseModel):
    """Item stored in the frontier priority queue."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    priority: int
    heuristic: int
    order: int
    cost: int
    node: PlanNode

    def __lt__(self, other: object) -> bool:
        """Order by ``f``, then by ``h``, then by insertion order."""
        if not isinstance(other, FrontierEntry):
            return NotImplemented
        return (self.priority, self.heuristic, self.order) < (
            other.priority,
            other.heuristic,
            other.order,
        )


class TransitionRecord(BaseModel):
    """Record describing how the best known node for a state was reached."""

    previous_state: WorldState
    node: PlanNode


def _frontier_factory() -> list[FrontierEntry]:
    return []


def _score_factory() -> dict[WorldState, int]:
    return {}


def _transition_factory() -> dict[WorldState, TransitionRecord]:
    return {}


def _closed_factory() -> set[WorldState]:
    return set()


class SearchContext(BaseModel):
    """Mutable structures scoped to a single A* search.

    Nodes are identified by their world state alone: reaching the same state
    through a different action is the same search node.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    frontier: list[FrontierEntry] = Field(default_factory=_frontier_factory)
    g_score: dict[WorldState, int] = Field(default_factory=_score_factory)
    came_from: dict[WorldState, TransitionRecord] = Field(default_factory=_transition_factory)
    closed: set[WorldState] = Field(default_factory=_closed_factory)
    next_order: int = Field(default=0)

    def has_entries(self) -> bool:
        """Return whether the frontier still contains entries."""
        return bool(self.frontier)

    def push(self, *, node: PlanNode, cost: int, heuristic: int) -> None:
        """Insert a node into the frontier with ``f = cost + heuristic``."""
        order = self.next_order
        self.next_order += 1
        heappush(
            self.frontier,
            FrontierEntry(
                priority=cost + heuristic,
                heuristic=heuristic,
                order=order,
                cost=cost,
                node=node,
            ),
        )

    def pop(self) -> FrontierEntry:
        """Remove and return the next frontier entry."""
        return heappop(self.frontier)

    def is_stale(self, entry: FrontierEntry) -> bool:
        """Return whether a cheaper path superseded ``entry`` or it was closed."""
        state = entry.node.state
        return state in self.closed or entry.cost > self.g_score[state]

    def close(self, state: WorldState) -> None:
        """Mark the state's cost as final."""
        self.closed.add(state)

    def record_transition(
        self,
        *,
        node: PlanNode,
        previous_state: WorldState,
        cost: int,
        goal: GoalDefinition,
    ) -> None:
        """Register the best known path to a successor state."""
        # A strictly cheaper path reopens a closed state.
        self.closed.discard(node.state)
        self.came_from[node.state] = TransitionRecord(
            previous_state=previous_state,
            node=node,
        )
        self.g_score[node.state] = cost
        self.push(node=node, cost=cost, heuristic=goal.heuristic(node))


def _reconstruct_path(
    came_from: Mapping[WorldState, TransitionRecord],
    goal_node: PlanNode,
    start: PlanNode,
) -> list[PlanNode]:
    """Backtrack from the goal node to the start node, both included."""
    path: list[PlanNode] = []
    node = goal_node
    while node.state != start.state:
        path.append(node)
        previous_state = came_from[node.state].previous_state
        node = start if previous_state == start.state else came_from[previous_state].node
    path.append(start)
    path.reverse()
    return path


def extract_plan(path: Sequence[PlanNode]) -> list[ActionSchema]:
    """Return the incoming actions along ``path``, skipping the start node."""
    actions: list[ActionSchema] = []
    for node in path[1:]:
        if node.action is None:  # pragma: no cover - only the start node lacks one
            message = "Only the start node may lack an incoming action."
            raise PlanningError(message)
        actions.append(node.action)
    return actions


class PlannerEngine(BaseModel):
    """Coordinator responsible for executing the A* planning algorithm."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    goal: GoalDefinition
    actions: list[ActionSchema]
    max_expansions: int | None = None
    context: SearchContext = Field(default_factory=SearchContext)
    expansions: int = 0

    def initialize(self, start: PlanNode) -> None:
        """Seed the search context with the start node."""
        self.context.g_score[start.state] = 0
        self.context.push(node=start, cost=0, heuristic=self.goal.heuristic(start))

    def execute(self, start: PlanNode) -> list[PlanNode] | None:
        """Run the search and return the node path, or ``None`` without a plan."""
        self.initialize(start)

        while self.context.has_entries():
            entry = self.context.pop()
            if self.context.is_stale(entry):
                continue

            current = entry.node
            if self.goal.is_satisfied(current):
                return _reconstruct_path(self.context.came_from, current, start)

            if self.max_expansions is not None and self.expansions >= self.max_expansions:
                raise SearchBudgetExceededError(self.max_expansions)

            self.context.close(current.state)
            self.expansions += 1
            self._expand_from(current, entry.cost)

        return None

    def _expand_from(self, node: PlanNode, current_cost: int) -> None:
        """Explore applicable actions from the provided node."""
        for child, step_cost in expand(node, self.actions):
            tentative_cost = current_cost + step_cost
            known_cost = self.context.g_score.get(child.state)

            if known_cost is not None and tentative_cost >= known_cost:
                continue

            self.context.record_transition(
                node=child,
                previous_state=node.state,
                cost=tentative_cost,
                goal=self.goal,
            )


def explain(
    initial_state: StateLike,
    goal_state: StateLike,
    actions: Iterable[ActionSchema],
    *,
    max_expansions: int | None = None,
) -> PlanResult | None:
    """Search for the cheapest plan and report its cost and search effort.

    Returns ``None`` when the goal cannot be reached from ``initial_state``.
    """
    start = PlanNode.initial(coerce_state(initial_state))
    goal = GoalDefinition(target=coerce_state(goal_state))
    catalog = list(actions)

    _LOGGER.debug(
        "Starting GOAP search.",
        extra={
            "event": "search_start",
            "available_actions": [action.name for action in catalog],
            "goal": goal.target.as_dict(),
        },
    )

    engine = PlannerEngine(goal=goal, actions=catalog, max_expansions=max_expansions)
    path = engine.execute(start)

    if path is None:
        _LOGGER.info(
            "No plan reaches the goal.",
            extra={"event": "plan_not_found", "expansions": engine.expansions},
        )
        return None

    planned = extract_plan(path)
    result = PlanResult(
        actions=tuple(planned),
        total_cost=engine.context.g_score[path[-1].state],
        expansions=engine.expansions,
    )
    _LOGGER.info(
        "Plan generated successfully.",
        extra={
            "event": "plan_found",
            "actions": result.action_names,
            "total_cost": result.total_cost,
            "expansions": result.expansions,
        },
    )
    return result


def plan(
    initial_state: StateLike,
    goal_state: StateLike,
    actions: Iterable[ActionSchema],
    *,
    max_expansions: int | None = None,
) -> list[ActionSchema] | None:
    """Return the minimum-cost action sequence reaching ``goal_state``.

    An empty list means the goal already holds; ``None`` means no sequence of
    actions reaches it. The returned actions are the caller's own objects.
    """
    result = explain(initial_state, goal_state, actions, max_expansions=max_expansions)
    if result is None:
        return None
    return list(result.actions)
