"""Contract checker - the entry point of the property contract core.

Given the declaration sites the component registry located for one
component, build its property and default sets and diff them under the
active rule policy. Unresolvable input is never an error: it yields no
violations.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from propcontract.config.models import RuleConfig
from propcontract.contract.bindings import BindingTable
from propcontract.contract.builders import build_default_set, build_property_sets
from propcontract.contract.forms import Site
from propcontract.contract.models import ComponentKind, Location, Opaque, Violation
from propcontract.contract.reconciler import reconcile
from propcontract.core.logging import get_logger

log = get_logger("contract")


@dataclass(frozen=True)
class ComponentRecord:
    """One classified component and the raw sites of its two declarations."""

    name: str
    kind: ComponentKind
    location: Location
    property_sites: tuple[Site, ...] = ()
    default_sites: tuple[Site, ...] = ()


def check_component(
    component: ComponentRecord,
    table: BindingTable,
    rule: RuleConfig | None = None,
) -> list[Violation]:
    """Return the contract violations of a single component, in declaration order."""
    rule = rule or RuleConfig()

    if component.kind is ComponentKind.NOT_A_COMPONENT:
        return []
    if rule.ignore_functional_components and component.kind is ComponentKind.FUNCTION:
        log.debug("component_ignored", component=component.name, kind=component.kind.value)
        return []

    wrappers = frozenset(rule.transparent_wrappers)
    property_sets = build_property_sets(component.property_sites, table, wrappers)
    if not property_sets:
        return []

    defaults = build_default_set(component.default_sites, table, wrappers)
    if isinstance(defaults, Opaque):
        log.debug("defaults_opaque", component=component.name, reason=defaults.reason)
    for shape in property_sets:
        if isinstance(shape, Opaque):
            log.debug("property_shape_opaque", component=component.name, reason=shape.reason)

    return reconcile(
        property_sets,
        defaults,
        forbid_default_for_required=rule.forbid_default_for_required,
    )


def check_components(
    components: Sequence[ComponentRecord],
    table: BindingTable,
    rule: RuleConfig | None = None,
) -> list[Violation]:
    violations: list[Violation] = []
    for component in components:
        violations.extend(check_component(component, table, rule))
    return violations
