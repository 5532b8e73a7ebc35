"""Contract models - entries, resolution states and violations.

All values are immutable and recomputed on every analysis pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ComponentKind(Enum):
    """How the component registry classified a construct."""

    FUNCTION = "function"
    CLASS = "class"
    FACTORY = "factory"
    NOT_A_COMPONENT = "not_a_component"


class ViolationKind(Enum):
    MISSING_DEFAULT = "missing_default"
    DEFAULT_ON_REQUIRED = "default_on_required"


@dataclass(frozen=True, slots=True, order=True)
class Location:
    """1-based line and column of the node that owns an entry."""

    line: int
    column: int

    @classmethod
    def of(cls, node: Any) -> Location:
        """Location of a tree-sitter node (its points are 0-based)."""
        row, col = node.start_point
        return cls(line=row + 1, column=col + 1)


@dataclass(frozen=True, slots=True)
class PropertyEntry:
    name: str
    optional: bool
    location: Location


@dataclass(frozen=True, slots=True)
class DefaultEntry:
    name: str
    location: Location


@dataclass(frozen=True)
class Resolved[E]:
    """Exhaustive entry list: every member present in source is captured."""

    entries: tuple[E, ...] = ()

    @property
    def names(self) -> frozenset[str]:
        return frozenset(e.name for e in self.entries)  # type: ignore[attr-defined]


@dataclass(frozen=True, slots=True)
class Opaque:
    """Declaration could not be proven exhaustive; nothing may be reported from it."""

    reason: str


type ResolutionState[E] = Resolved[E] | Opaque
type PropertySet = ResolutionState[PropertyEntry]
type DefaultSet = ResolutionState[DefaultEntry]


@dataclass(frozen=True, slots=True)
class Violation:
    kind: ViolationKind
    property_name: str
    location: Location
