"""Tests for contract/reconciler.py module."""

from __future__ import annotations

from propcontract.contract.models import (
    DefaultEntry,
    Location,
    Opaque,
    PropertyEntry,
    Resolved,
    ViolationKind,
)
from propcontract.contract.reconciler import reconcile


def prop(name: str, optional: bool, line: int = 1) -> PropertyEntry:
    return PropertyEntry(name, optional, Location(line, 3))


def default(name: str) -> DefaultEntry:
    return DefaultEntry(name, Location(20, 3))


class TestReconcile:
    """Tests for reconcile function."""

    def test_each_shape_checked_independently(self) -> None:
        """Two union members each report their own missing default."""
        shapes = [Resolved((prop("one", True, 2),)), Resolved((prop("two", True, 5),))]

        violations = reconcile(shapes, Resolved())

        assert [(v.property_name, v.location.line) for v in violations] == [("one", 2), ("two", 5)]

    def test_opaque_shape_does_not_silence_siblings(self) -> None:
        shapes = [Opaque("spread"), Resolved((prop("two", True, 5),))]

        violations = reconcile(shapes, Resolved())

        assert [v.property_name for v in violations] == ["two"]

    def test_opaque_defaults_silence_everything(self) -> None:
        shapes = [Resolved((prop("one", True),)), Resolved((prop("two", True),))]

        assert reconcile(shapes, Opaque("spread")) == []

    def test_duplicate_names_reported_per_shape(self) -> None:
        """Shared names are not deduplicated across union members."""
        shapes = [Resolved((prop("foo", True, 2),)), Resolved((prop("foo", True, 6),))]

        violations = reconcile(shapes, Resolved())

        assert [v.location.line for v in violations] == [2, 6]

    def test_default_on_required_only_when_forbidden(self) -> None:
        shapes = [Resolved((prop("foo", False),))]
        defaults = Resolved((default("foo"),))

        assert reconcile(shapes, defaults) == []
        violations = reconcile(shapes, defaults, forbid_default_for_required=True)
        assert [v.kind for v in violations] == [ViolationKind.DEFAULT_ON_REQUIRED]

    def test_default_for_unknown_prop_is_not_reported(self) -> None:
        """Extra defaults are another rule's concern."""
        shapes = [Resolved((prop("foo", True),))]
        defaults = Resolved((default("foo"), default("stray")))

        assert reconcile(shapes, defaults, forbid_default_for_required=True) == []
