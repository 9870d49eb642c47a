"""Action catalogs and JSON loaders for planner inputs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from goapplan.schemas import ActionSchema, PlanningCase

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

__all__ = [
    "ActionCatalog",
    "CatalogError",
    "DuplicateActionError",
    "InvalidActionError",
    "UnknownActionError",
    "load_actions",
    "load_case",
    "load_cases",
]


_ACTION_LIST_ADAPTER = TypeAdapter(list[ActionSchema])


class CatalogError(RuntimeError):
    """Base exception for catalog related failures."""


class DuplicateActionError(CatalogError):
    """Raised when attempting to add an action whose name already exists."""

    def __init__(self, name: str) -> None:
        """Initialise the error with the conflicting action name."""
        super().__init__(f"Action '{name}' is already in the catalog.")
        self.name = name


class UnknownActionError(CatalogError):
    """Raised when requesting an action that is not present in the catalog."""

    def __init__(self, name: str) -> None:
        """Initialise the error with the missing action name."""
        super().__init__(f"Action '{name}' is not in the catalog.")
        self.name = name


class InvalidActionError(CatalogError):
    """Raised when an action cannot be used as a catalog entry."""


class ActionCatalog:
    """Ordered collection of actions keyed by their unique names.

    The planner relies on names being unique within one catalog; this class
    is where that is enforced for callers assembling catalogs by hand.
    """

    def __init__(self, actions: Iterable[ActionSchema] = ()) -> None:
        self._actions: dict[str, ActionSchema] = {}
        for action in actions:
            self.register(action)

    def register(self, action: ActionSchema) -> None:
        """Store the action, ensuring no duplicate names exist."""
        self._validate(action)
        self._ensure_unique(action.name)
        self._actions[action.name] = action

    def get(self, name: str) -> ActionSchema:
        """Return the action registered under ``name``."""
        action = self._actions.get(name)
        if action is None:
            raise UnknownActionError(name)
        return action

    def list_schemas(self) -> list[ActionSchema]:
        """Return all actions preserving insertion order."""
        return list(self._actions.values())

    def names(self) -> list[str]:
        """Return all action names preserving insertion order."""
        return list(self._actions)

    def __iter__(self) -> Iterator[ActionSchema]:
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    @staticmethod
    def _validate(action: ActionSchema) -> None:
        """Ensure the provided action has a non-empty name."""
        if not action.name.strip():
            message = "Action must define a non-empty name."
            raise InvalidActionError(message)

    def _ensure_unique(self, name: str) -> None:
        if name in self._actions:
            raise DuplicateActionError(name)


def _read_text(path: Path | str) -> str:
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(source)
    if not source.is_file():
        message = f"Path is not a file: {source}"
        raise ValueError(message)
    return source.read_text(encoding="utf-8")


def load_actions(path: Path | str) -> ActionCatalog:
    """Load a JSON array of action records into a validated catalog."""
    actions = _ACTION_LIST_ADAPTER.validate_json(_read_text(path))
    return ActionCatalog(actions)


def load_case(path: Path | str) -> PlanningCase:
    """Load a planning case, naming it after its file.

    The case's actions are checked for unique, non-empty names.
    """
    source = Path(path)
    case = PlanningCase.model_validate_json(_read_text(source))
    ActionCatalog(case.actions)
    return case.model_copy(update={"case_name": source.name})


def load_cases(directory: Path | str) -> list[PlanningCase]:
    """Load every ``*.json`` planning case in ``directory`` sorted by file name."""
    root = Path(directory)
    if not root.is_dir():
        message = f"Path is not a directory: {root}"
        raise ValueError(message)
    return [load_case(path) for path in sorted(root.glob("*.json"))]
