"""Property contract core: builders, union reconciliation and the checker."""

from propcontract.contract.bindings import BindingTable, BindingTableBuilder, resolve_binding
from propcontract.contract.builders import build_default_set, build_property_sets
from propcontract.contract.checker import ComponentRecord, check_component, check_components
from propcontract.contract.models import (
    ComponentKind,
    DefaultEntry,
    Location,
    Opaque,
    PropertyEntry,
    Resolved,
    Violation,
    ViolationKind,
)
from propcontract.contract.reconciler import reconcile

__all__ = [
    "BindingTable",
    "BindingTableBuilder",
    "ComponentKind",
    "ComponentRecord",
    "DefaultEntry",
    "Location",
    "Opaque",
    "PropertyEntry",
    "Resolved",
    "Violation",
    "ViolationKind",
    "build_default_set",
    "build_property_sets",
    "check_component",
    "check_components",
    "reconcile",
    "resolve_binding",
]
