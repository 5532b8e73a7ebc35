"""Union reconciliation: every property shape answers to the same defaults."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from propcontract.contract.models import (
    DefaultSet,
    Opaque,
    PropertySet,
    Resolved,
    Violation,
    ViolationKind,
)


def diff_shape(
    shape: Resolved, defaults: Resolved, *, forbid_default_for_required: bool
) -> Iterator[Violation]:
    """Diff one resolved property shape against resolved defaults."""
    declared = defaults.names
    for entry in shape.entries:
        has_default = entry.name in declared
        if entry.optional and not has_default:
            yield Violation(ViolationKind.MISSING_DEFAULT, entry.name, entry.location)
        if forbid_default_for_required and not entry.optional and has_default:
            yield Violation(ViolationKind.DEFAULT_ON_REQUIRED, entry.name, entry.location)


def reconcile(
    property_sets: Sequence[PropertySet],
    defaults: DefaultSet,
    *,
    forbid_default_for_required: bool = False,
) -> list[Violation]:
    """Check each resolvable shape independently.

    Opaque shapes are skipped one by one, so an unresolvable union member
    never silences its siblings. Duplicate names across shapes are reported
    once per shape, at that shape's own location.
    """
    if isinstance(defaults, Opaque):
        return []
    violations: list[Violation] = []
    for shape in property_sets:
        if isinstance(shape, Opaque):
            continue
        violations.extend(
            diff_shape(shape, defaults, forbid_default_for_required=forbid_default_for_required)
        )
    return violations
