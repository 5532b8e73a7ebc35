"""Component registry - find components and their declaration sites.

A single file is walked twice: once to collect the static member writes
(``Name.propTypes = ...``, ``Name.defaultProps.x = ...``) which may appear
anywhere in the file, and once to classify class, factory and function
components. Sites from both passes are merged per component in source order.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from propcontract.components.lowering import (
    is_required_value,
    is_static,
    key_name,
    lower_accessor,
    lower_method,
    lower_type,
    lower_value,
    returns_jsx,
)
from propcontract.config.models import DetectionConfig
from propcontract.contract.checker import ComponentRecord
from propcontract.contract.forms import IncrementalWrite, MethodForm, OpaqueForm, Site
from propcontract.contract.models import ComponentKind, Location
from propcontract.core.logging import get_logger
from propcontract.parsing.treesitter import ParseResult, dotted_name, named_children, node_text, walk

log = get_logger("components")

PROPS = "propTypes"
DEFAULTS = "defaultProps"
ANONYMOUS = "<anonymous>"

_FUNCTION_NODES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "arrow_function",
    }
)
_CLASS_NODES = frozenset({"class_declaration", "class"})
_FIELD_NODES = frozenset({"field_definition", "public_field_definition"})
# Subscript indexes that name a member statically; ``obj[key]`` does not.
_LITERAL_KEYS = frozenset({"string", "number"})


@dataclass(frozen=True, slots=True)
class _Placed:
    """A site with its byte offset.

    ``runtime`` sites can be overwritten by a later runtime declaration;
    ``replaces`` marks a whole-object declaration that does the overwriting.
    """

    start: int
    site: Site
    runtime: bool = True
    replaces: bool = True


@dataclass
class _Declarations:
    props: list[_Placed] = field(default_factory=list)
    defaults: list[_Placed] = field(default_factory=list)

    def add(self, declaration: str, placed: _Placed) -> None:
        (self.props if declaration == PROPS else self.defaults).append(placed)


def _finalize(placed: list[_Placed]) -> tuple[Site, ...]:
    """Order sites and drop runtime sites overwritten by a later whole declaration."""
    ordered = sorted(placed, key=lambda p: p.start)
    cut = max((p.start for p in ordered if p.runtime and p.replaces), default=-1)
    return tuple(p.site for p in ordered if not p.runtime or p.start >= cut)


# =============================================================================
# Static member writes
# =============================================================================


def _write_target(left: Any) -> tuple[str, str, Any] | None:
    """Split an assignment target into (owner, declaration, member node).

    The member node is None for a whole assignment (``Owner.propTypes = ...``)
    and the subscript itself when its index is computed.
    """
    if left.type == "member_expression":
        prop = left.child_by_field_name("property")
        owner_node = left.child_by_field_name("object")
        if prop is not None and prop.type == "property_identifier" and node_text(prop) in (PROPS, DEFAULTS):
            owner = dotted_name(owner_node)
            return (owner, node_text(prop), None) if owner else None
        member = prop
    elif left.type == "subscript_expression":
        owner_node = left.child_by_field_name("object")
        member = left.child_by_field_name("index")
        if member is not None and member.type not in _LITERAL_KEYS:
            member = left
    else:
        return None

    if owner_node is None or owner_node.type != "member_expression":
        return None
    declaration = owner_node.child_by_field_name("property")
    if declaration is None or node_text(declaration) not in (PROPS, DEFAULTS):
        return None
    owner = dotted_name(owner_node.child_by_field_name("object"))
    if owner is None:
        return None
    return owner, node_text(declaration), member


def collect_static_writes(root: Any) -> dict[str, _Declarations]:
    writes: dict[str, _Declarations] = defaultdict(_Declarations)
    for node in walk(root):
        if node.type != "assignment_expression":
            continue
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            continue
        target = _write_target(left)
        if target is None:
            continue

        owner, declaration, member = target
        if member is None:
            writes[owner].add(declaration, _Placed(node.start_byte, lower_value(right)))
            continue
        name = key_name(member)
        if name is None:
            # a computed write leaves the declaration non-enumerable
            site: Site = OpaqueForm("computed member write")
        else:
            site = IncrementalWrite(name, not is_required_value(right), Location.of(node))
        writes[owner].add(declaration, _Placed(node.start_byte, site, replaces=False))
    return writes


# =============================================================================
# Naming
# =============================================================================


def _binding_name(node: Any) -> str | None:
    """Name a nameless construct after what it is bound to."""
    child, parent = node, node.parent
    while parent is not None and parent.type == "parenthesized_expression":
        child, parent = parent, parent.parent
    if parent is None:
        return None
    if parent.type == "variable_declarator" and parent.child_by_field_name("value") == child:
        return dotted_name(parent.child_by_field_name("name"))
    if parent.type == "assignment_expression" and parent.child_by_field_name("right") == child:
        return dotted_name(parent.child_by_field_name("left"))
    if parent.type == "export_statement":
        return "default"
    return None


def _own_name(node: Any) -> str | None:
    name = node.child_by_field_name("name")
    return node_text(name) if name is not None else None


def _declarator_of(node: Any) -> Any:
    parent = node.parent
    while parent is not None and parent.type == "parenthesized_expression":
        parent = parent.parent
    return parent if parent is not None and parent.type == "variable_declarator" else None


# =============================================================================
# Classification
# =============================================================================


@dataclass
class _Candidate:
    name: str
    kind: ComponentKind
    node: Any
    declarations: _Declarations = field(default_factory=_Declarations)


def _qualified(names: list[str], pragma: str) -> frozenset[str]:
    return frozenset(names) | {f"{pragma}.{name}" for name in names}


def _heritage(node: Any) -> tuple[str | None, Any]:
    """Return the ``extends`` target and its type arguments, if any."""
    for child in node.children:
        if child.type != "class_heritage":
            continue
        for clause in named_children(child):
            if clause.type == "implements_clause":
                continue
            if clause.type != "extends_clause":
                return dotted_name(clause), None
            value = clause.child_by_field_name("value")
            type_args = clause.child_by_field_name("type_arguments")
            if value is not None and value.type == "instantiation_expression":
                type_args = value.child_by_field_name("type_arguments")
                value = value.child_by_field_name("function")
            return dotted_name(value), type_args
    return None, None


def _first_type_argument(type_args: Any) -> Any:
    if type_args is None:
        return None
    args = named_children(type_args)
    return args[0] if args else None


def _class_candidate(node: Any, detection: DetectionConfig) -> _Candidate | None:
    base, type_args = _heritage(node)
    if base is None or base not in _qualified(detection.component_base_classes, detection.pragma):
        return None

    name = _own_name(node) or _binding_name(node) or ANONYMOUS
    candidate = _Candidate(name, ComponentKind.CLASS, node)
    decls = candidate.declarations

    props_type = _first_type_argument(type_args)
    if props_type is not None:
        decls.add(PROPS, _Placed(props_type.start_byte, lower_type(props_type), runtime=False))

    body = node.child_by_field_name("body")
    for member in named_children(body) if body is not None else []:
        if member.type in _FIELD_NODES:
            _class_field(member, decls)
        elif member.type == "method_definition" and is_static(member):
            method_name = key_name(member.child_by_field_name("name"))
            if method_name in (PROPS, DEFAULTS):
                form = lower_method(member, method_name)
                decls.add(
                    method_name,
                    _Placed(member.start_byte, form, replaces=not isinstance(form, MethodForm)),
                )
    return candidate


def _class_field(member: Any, decls: _Declarations) -> None:
    name_node = member.child_by_field_name("property")
    if name_node is None:
        name_node = member.child_by_field_name("name")
    name = key_name(name_node)
    value = member.child_by_field_name("value")
    annotation = member.child_by_field_name("type")

    if is_static(member):
        if name in (PROPS, DEFAULTS) and value is not None:
            decls.add(name, _Placed(member.start_byte, lower_value(value)))
    elif name == "props" and annotation is not None and value is None:
        decls.add(PROPS, _Placed(member.start_byte, lower_type(annotation), runtime=False))


def _factory_candidate(node: Any, detection: DetectionConfig) -> _Candidate | None:
    callee = dotted_name(node.child_by_field_name("function"))
    factories = frozenset(detection.factory_functions) | {f"{detection.pragma}.createClass"}
    if callee not in factories:
        return None
    args = node.child_by_field_name("arguments")
    values = named_children(args) if args is not None else []
    if not values or values[0].type != "object":
        return None

    candidate = _Candidate(_binding_name(node) or ANONYMOUS, ComponentKind.FACTORY, node)
    decls = candidate.declarations
    for member in named_children(values[0]):
        if member.type == "pair":
            name = key_name(member.child_by_field_name("key"))
            value = member.child_by_field_name("value")
            if value is None:
                continue
            if name == PROPS:
                decls.add(PROPS, _Placed(member.start_byte, lower_value(value)))
            elif name == "getDefaultProps":
                form = lower_accessor(value) if value.type in _FUNCTION_NODES else OpaqueForm(value.type)
                decls.add(DEFAULTS, _Placed(member.start_byte, form))
        elif member.type == "method_definition":
            if key_name(member.child_by_field_name("name")) == "getDefaultProps":
                decls.add(DEFAULTS, _Placed(member.start_byte, lower_accessor(member)))
    return candidate


def _function_candidate(node: Any, detection: DetectionConfig) -> _Candidate | None:
    exported = node.parent is not None and node.parent.type == "export_statement"
    if node.type == "function_declaration" or exported:
        name = _own_name(node) or _binding_name(node)
    else:
        name = _binding_name(node) or _own_name(node)
    if name is None or not returns_jsx(node):
        return None

    candidate = _Candidate(name, ComponentKind.FUNCTION, node)
    decls = candidate.declarations

    declarator = _declarator_of(node)
    if declarator is not None:
        annotation = declarator.child_by_field_name("type")
        props_type = _component_type_argument(annotation, detection)
        if props_type is not None:
            decls.add(PROPS, _Placed(props_type.start_byte, lower_type(props_type), runtime=False))

    params = node.child_by_field_name("parameters")
    first = named_children(params)[0] if params is not None and named_children(params) else None
    if first is not None and first.type in ("required_parameter", "optional_parameter"):
        annotation = first.child_by_field_name("type")
        if annotation is not None:
            decls.add(PROPS, _Placed(annotation.start_byte, lower_type(annotation), runtime=False))
    return candidate


def _component_type_argument(annotation: Any, detection: DetectionConfig) -> Any:
    """``Props`` out of ``const X: React.FC<Props> = ...``."""
    if annotation is None:
        return None
    inner = named_children(annotation)
    if not inner or inner[0].type != "generic_type":
        return None
    generic = inner[0]
    names = _qualified(detection.function_component_types, detection.pragma)
    if dotted_name(generic.child_by_field_name("name")) not in names:
        return None
    return _first_type_argument(generic.child_by_field_name("type_arguments"))


def _classify(node: Any, detection: DetectionConfig) -> _Candidate | None:
    if node.type in _CLASS_NODES:
        return _class_candidate(node, detection)
    if node.type == "call_expression":
        return _factory_candidate(node, detection)
    if node.type in _FUNCTION_NODES:
        return _function_candidate(node, detection)
    return None


def find_components(result: ParseResult, detection: DetectionConfig | None = None) -> list[ComponentRecord]:
    """Classify every component of a parsed file, in source order."""
    detection = detection or DetectionConfig()
    root = result.root_node
    writes = collect_static_writes(root)

    records: list[ComponentRecord] = []
    for node in walk(root):
        candidate = _classify(node, detection)
        if candidate is None:
            continue
        decls = candidate.declarations
        external = writes.get(candidate.name)
        props = decls.props + (external.props if external else [])
        defaults = decls.defaults + (external.defaults if external else [])
        records.append(
            ComponentRecord(
                name=candidate.name,
                kind=candidate.kind,
                location=Location.of(candidate.node),
                property_sites=_finalize(props),
                default_sites=_finalize(defaults),
            )
        )
        log.debug(
            "component_found",
            component=candidate.name,
            kind=candidate.kind.value,
            property_sites=len(props),
            default_sites=len(defaults),
        )
    return records
