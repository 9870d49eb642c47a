"""Core Pydantic models describing boolean world states."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    field_validator,
    model_serializer,
    model_validator,
)

__all__ = ["StateLike", "WorldState", "coerce_state"]


AtomPairs = tuple[tuple[str, StrictBool], ...]


class WorldState(BaseModel):
    """Immutable snapshot mapping atom names to boolean values.

    Atoms are kept sorted by name, so two states holding the same pairs compare
    and hash identically whatever order they were declared in. A missing atom
    means the value is unknown, never ``False``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    atoms: AtomPairs = ()

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_mapping(cls, value: Any) -> Any:
        """Allow ``{"near_dog": true}`` style payloads in place of ``atoms``."""
        if isinstance(value, Mapping):
            mapping = cast("Mapping[Any, Any]", value)
            if all(isinstance(item, bool) for item in mapping.values()):
                return {"atoms": list(mapping.items())}
        return value

    @field_validator("atoms", mode="before")
    @classmethod
    def _expand_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return list(cast("Mapping[Any, Any]", value).items())
        return value

    @field_validator("atoms")
    @classmethod
    def _canonical_order(cls, value: AtomPairs) -> AtomPairs:
        """Sort atoms by name; later duplicates overwrite earlier ones."""
        return tuple(sorted(dict(value).items()))

    @model_serializer(mode="plain")
    def _serialize(self) -> dict[str, bool]:
        return dict(self.atoms)

    @classmethod
    def from_mapping(cls, atoms: Mapping[str, bool] | None = None) -> WorldState:
        """Construct a state from an atom mapping."""
        return cls(atoms=tuple((atoms or {}).items()))

    def __len__(self) -> int:
        return len(self.atoms)

    def __contains__(self, name: object) -> bool:
        return any(atom == name for atom, _ in self.atoms)

    def items(self) -> AtomPairs:
        """Return the ``(name, value)`` pairs in canonical order."""
        return self.atoms

    def names(self) -> tuple[str, ...]:
        """Return the atom names in canonical order."""
        return tuple(name for name, _ in self.atoms)

    def as_dict(self) -> dict[str, bool]:
        """Return a mutable copy of the atoms."""
        return dict(self.atoms)

    def has(self, name: str) -> bool:
        """Return whether the state constrains ``name``."""
        return name in self

    def get(self, name: str, default: bool | None = None) -> bool | None:
        """Return the value of ``name`` or ``default`` when it is unknown."""
        for atom, value in self.atoms:
            if atom == name:
                return value
        return default

    def with_atom(self, name: str, value: bool) -> WorldState:
        """Return a copy of the state with ``name`` set to ``value``."""
        return self.overlay(WorldState(atoms=((name, value),)))

    def overlay(self, partial: WorldState) -> WorldState:
        """Return the state with every atom of ``partial`` written over it."""
        if not partial.atoms:
            return self
        merged = dict(self.atoms)
        merged.update(partial.atoms)
        return WorldState(atoms=tuple(merged.items()))

    def mismatch_count(self, target: WorldState) -> int:
        """Count atoms of ``target`` that are missing here or hold another value."""
        current = dict(self.atoms)
        return sum(
            1 for name, expected in target.atoms if current.get(name) != expected
        )

    def satisfies(self, target: WorldState) -> bool:
        """Return whether every atom of ``target`` holds in this state."""
        return self.mismatch_count(target) == 0


StateLike = WorldState | Mapping[str, bool]


def coerce_state(value: StateLike) -> WorldState:
    """Return ``value`` as a :class:`WorldState` without copying existing states."""
    if isinstance(value, WorldState):
        return value
    return WorldState.from_mapping(value)
