"""Property and default set builders.

Both builders reduce an ordered list of declaration sites to resolution
states. Reduction rules, in order:

- ObjectForm without spread or computed keys -> Resolved
- ObjectForm with spread / computed keys -> Opaque
- CallForm of a transparent wrapper -> reduce its first argument
- any other CallForm, OpaqueForm -> Opaque
- RefForm -> reduce the binding's unique initializer, Opaque if none
- UnionForm -> one state per member (property side only)
- AccessorForm -> reduce the returned form, Opaque without a sole return
- MethodForm -> not a source; the site is ignored

A Resolved list is either exhaustive or replaced by Opaque as a whole.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence

from propcontract.contract.bindings import BindingTable, resolve_binding
from propcontract.contract.forms import (
    AccessorForm,
    CallForm,
    DeclForm,
    IncrementalWrite,
    Member,
    MethodForm,
    ObjectForm,
    OpaqueForm,
    RefForm,
    Site,
    UnionForm,
)
from propcontract.contract.models import (
    DefaultEntry,
    DefaultSet,
    Opaque,
    PropertyEntry,
    PropertySet,
    Resolved,
)

# Variance / read-only prefixes that never belong to the property name.
_NAME_PREFIXES = ("+", "-")


def _clean_name(name: str) -> str:
    return name.lstrip("".join(_NAME_PREFIXES)).strip()


def _reduce(
    form: DeclForm,
    table: BindingTable,
    wrappers: Collection[str],
    *,
    allow_union: bool,
) -> list[Resolved[Member] | Opaque] | None:
    """Reduce one form to member-level shapes. None means "not a source"."""
    match form:
        case ObjectForm(spread=True):
            return [Opaque("spread")]
        case ObjectForm(computed=True):
            return [Opaque("computed key")]
        case ObjectForm(members=members):
            return [Resolved(tuple(members))]
        case CallForm(callee=callee, argument=argument):
            if callee in wrappers and argument is not None:
                return _reduce(argument, table, wrappers, allow_union=allow_union)
            return [Opaque(f"call to {callee}")]
        case RefForm(name=name):
            target = resolve_binding(table, form)
            if target is None:
                return [Opaque(f"unresolved binding {name}")]
            return _reduce(target, table, wrappers, allow_union=allow_union)
        case UnionForm(members=members):
            if not allow_union:
                return [Opaque("union")]
            shapes: list[Resolved[Member] | Opaque] = []
            for member in members:
                reduced = _reduce(member, table, wrappers, allow_union=True)
                shapes.extend(reduced if reduced is not None else [Opaque("method in union")])
            return shapes
        case AccessorForm(returned=None):
            return [Opaque("accessor without a sole return")]
        case AccessorForm(returned=returned):
            return _reduce(returned, table, wrappers, allow_union=allow_union)
        case MethodForm():
            return None
        case OpaqueForm(reason=reason):
            return [Opaque(reason)]
    return [Opaque(f"unrecognized form {type(form).__name__}")]


def _merge(
    base: Resolved[Member] | Opaque, overlay: Resolved[Member] | Opaque
) -> Resolved[Member] | Opaque:
    """Merge two shapes by member name; the overlay wins on collisions."""
    if isinstance(base, Opaque):
        return base
    if isinstance(overlay, Opaque):
        return overlay
    merged: dict[str, Member] = {_clean_name(m.name): m for m in base.entries}
    for member in overlay.entries:
        merged[_clean_name(member.name)] = member
    return Resolved(tuple(merged.values()))


def _apply_writes(
    shape: Resolved[Member] | Opaque, writes: Sequence[IncrementalWrite]
) -> Resolved[Member] | Opaque:
    if isinstance(shape, Opaque) or not writes:
        return shape
    written = Resolved(tuple(Member(w.name, w.optional, w.location) for w in writes))
    return _merge(shape, written)


def _collect(
    sites: Sequence[Site],
    table: BindingTable,
    wrappers: Collection[str],
    *,
    allow_union: bool,
) -> list[Resolved[Member] | Opaque]:
    """Combine every full declaration site, then replay incremental writes."""
    shapes: list[Resolved[Member] | Opaque] | None = None
    writes: list[IncrementalWrite] = []
    for site in sites:
        if isinstance(site, IncrementalWrite):
            writes.append(site)
            continue
        reduced = _reduce(site, table, wrappers, allow_union=allow_union)
        if reduced is None:
            continue
        if shapes is None:
            shapes = reduced
        else:
            shapes = [_merge(base, overlay) for base in shapes for overlay in reduced]

    if shapes is None:
        if not writes:
            return []
        shapes = [Resolved()]
    return [_apply_writes(shape, writes) for shape in shapes]


def build_property_sets(
    sites: Sequence[Site],
    table: BindingTable,
    wrappers: Collection[str] = (),
) -> list[PropertySet]:
    """Reduce property-type declaration sites to one PropertySet per shape.

    A union declaration yields one set per member; an empty list means the
    component declares no properties at all.
    """
    result: list[PropertySet] = []
    for shape in _collect(sites, table, wrappers, allow_union=True):
        if isinstance(shape, Opaque):
            result.append(shape)
            continue
        result.append(
            Resolved(
                tuple(
                    PropertyEntry(name=_clean_name(m.name), optional=m.optional, location=m.location)
                    for m in shape.entries
                )
            )
        )
    return result


def build_default_set(
    sites: Sequence[Site],
    table: BindingTable,
    wrappers: Collection[str] = (),
) -> DefaultSet:
    """Reduce default-value declaration sites to a single DefaultSet.

    No site at all (or only plain methods) is ``Resolved(())``: nothing
    declares a default.
    """
    shapes = _collect(sites, table, wrappers, allow_union=False)
    if not shapes:
        return Resolved()
    shape = shapes[0]
    if isinstance(shape, Opaque):
        return shape
    return Resolved(tuple(DefaultEntry(name=_clean_name(m.name), location=m.location) for m in shape.entries))
