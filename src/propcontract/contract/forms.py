"""Declaration forms - the tagged union every declaration site is lowered to.

Literal objects, aliases, wrapper calls, accessors, plain methods, unions and
incremental member writes all reach the builders as one of these variants,
so reduction is a single ``match`` instead of type tests spread across the
checker. Lowering from tree-sitter nodes lives in
``propcontract.components.lowering``; tests build forms directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from propcontract.contract.models import Location

Namespace = Literal["value", "type"]

# Byte span of the node that opens a lexical scope; None is the module scope.
type Scope = tuple[int, int] | None


@dataclass(frozen=True, slots=True)
class Member:
    """A named field of an object literal or object type."""

    name: str
    optional: bool
    location: Location


@dataclass(frozen=True, slots=True)
class ObjectForm:
    """Object literal, object type or interface body.

    ``spread`` covers anything that merges in members that cannot be
    enumerated here: spread elements, ``extends`` clauses. ``computed``
    covers computed keys and index signatures.
    """

    members: tuple[Member, ...] = ()
    spread: bool = False
    computed: bool = False


@dataclass(frozen=True, slots=True)
class CallForm:
    callee: str
    argument: DeclForm | None = None


@dataclass(frozen=True, slots=True)
class RefForm:
    """A name, looked up from ``scope`` outward when resolved."""

    name: str
    namespace: Namespace = "value"
    scope: Scope = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class AccessorForm:
    """Getter-style source; ``returned`` is None unless the body is a sole return."""

    returned: DeclForm | None = None


@dataclass(frozen=True, slots=True)
class MethodForm:
    """Plain method sharing a declaration name. Never a declaration source."""

    name: str


@dataclass(frozen=True, slots=True)
class UnionForm:
    members: tuple[DeclForm, ...] = ()


@dataclass(frozen=True, slots=True)
class OpaqueForm:
    reason: str


@dataclass(frozen=True, slots=True)
class IncrementalWrite:
    """``Comp.propTypes.name = value`` / ``Comp.defaultProps.name = value``."""

    name: str
    optional: bool
    location: Location


type DeclForm = ObjectForm | CallForm | RefForm | AccessorForm | MethodForm | UnionForm | OpaqueForm
type Site = DeclForm | IncrementalWrite
