"""Binding resolution over a precomputed definition table.

The table is built once per file (see ``propcontract.components.scope``)
and never mutated afterwards. Resolution is a pure function of the table,
so it can be exercised without parsing anything.

Declarations are keyed by the scope they belong to. A reference is looked up
in its own scope first and then in each enclosing scope, so an inner name
shadows an outer one without poisoning it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from propcontract.contract.forms import DeclForm, Namespace, RefForm, Scope


class Unresolvable(Enum):
    """Table markers for names that have no single static initializer."""

    MULTIPLE = "multiple"  # declared twice in one scope, reassigned or mutated
    EXTERNAL = "external"  # import, parameter, declaration without initializer


type BindingKey = tuple[Scope, Namespace, str]
type BindingValue = DeclForm | Unresolvable


@dataclass(frozen=True)
class BindingTable:
    """``(scope, namespace, name) -> initializer form | Unresolvable``.

    ``parents`` maps every nested scope to the scope enclosing it; scopes
    missing from it sit directly in the module scope (None).
    """

    entries: Mapping[BindingKey, BindingValue] = field(default_factory=dict)
    parents: Mapping[Scope, Scope] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        object.__setattr__(self, "parents", MappingProxyType(dict(self.parents)))

    def find(self, namespace: Namespace, name: str, scope: Scope = None) -> BindingKey | None:
        """Key of the innermost declaration of ``name`` visible from ``scope``."""
        current = scope
        while True:
            key = (current, namespace, name)
            if key in self.entries:
                return key
            if current is None:
                return None
            current = self.parents.get(current)

    def lookup(self, namespace: Namespace, name: str, scope: Scope = None) -> BindingValue | None:
        key = self.find(namespace, name, scope)
        return self.entries[key] if key is not None else None

    def __len__(self) -> int:
        return len(self.entries)


class BindingTableBuilder:
    """Accumulates declarations; a second sighting in the same scope poisons a name.

    Writes are recorded as they are seen and applied in ``build`` once every
    declaration is known, so a write resolves to the binding it really hits
    even when that binding is declared later in the source.
    """

    def __init__(self) -> None:
        self._entries: dict[BindingKey, BindingValue] = {}
        self._parents: dict[Scope, Scope] = {}
        self._writes: list[tuple[Scope, Namespace, str]] = []

    def enter(self, scope: Scope, parent: Scope) -> None:
        """Record that ``scope`` is nested directly in ``parent``."""
        if scope is not None:
            self._parents[scope] = parent

    def declare(
        self,
        namespace: Namespace,
        name: str,
        initializer: DeclForm | None,
        scope: Scope = None,
    ) -> None:
        key = (scope, namespace, name)
        if key in self._entries:
            self._entries[key] = Unresolvable.MULTIPLE
        elif initializer is None:
            self._entries[key] = Unresolvable.EXTERNAL
        else:
            self._entries[key] = initializer

    def invalidate(self, namespace: Namespace, name: str, scope: Scope = None) -> None:
        """Record a reassignment or member mutation of ``name`` made in ``scope``."""
        self._writes.append((scope, namespace, name))

    def build(self) -> BindingTable:
        table = BindingTable(self._entries, self._parents)
        entries = dict(self._entries)
        for scope, namespace, name in self._writes:
            key = table.find(namespace, name, scope) or (None, namespace, name)
            entries[key] = Unresolvable.MULTIPLE
        return BindingTable(entries, self._parents)


def resolve_binding(table: BindingTable, ref: RefForm) -> DeclForm | None:
    """Follow ``ref`` through alias chains to its unique static initializer.

    Returns None when the chain ends at an unknown, external or
    multiply-defined name, or loops back on itself.
    """
    seen: set[BindingKey] = set()
    current: DeclForm = ref
    while isinstance(current, RefForm):
        key = (current.scope, current.namespace, current.name)
        if key in seen:
            return None
        seen.add(key)
        value = table.lookup(current.namespace, current.name, current.scope)
        if value is None or isinstance(value, Unresolvable):
            return None
        current = value
    return current
