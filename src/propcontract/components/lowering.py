"""Lowering of tree-sitter nodes to declaration forms.

Lowering is purely syntactic: identifiers become ``RefForm`` and are only
resolved later, against the file's binding table. Anything that is not a
recognised declaration shape becomes ``OpaqueForm`` carrying the node type,
which the builders treat as unresolvable.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from propcontract.contract.forms import (
    AccessorForm,
    CallForm,
    DeclForm,
    Member,
    MethodForm,
    ObjectForm,
    OpaqueForm,
    RefForm,
    Scope,
    UnionForm,
)
from propcontract.contract.models import Location
from propcontract.parsing.treesitter import (
    child_types,
    dotted_name,
    named_children,
    node_text,
    unwrap_parens,
)

REQUIRED_MARKER = "isRequired"

_JSX_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

# Node types that open a new function body; their returns are not ours.
FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)
_NESTED_BOUNDARIES = FUNCTION_TYPES | {"class_declaration", "class"}

# Expression wrappers that do not change the runtime value.
_TRANSPARENT_EXPRESSIONS = frozenset({"as_expression", "satisfies_expression", "non_null_expression"})

# Non-function nodes that hold their own let, const and class declarations.
_BLOCK_SCOPES = frozenset(
    {
        "statement_block",
        "switch_body",
        "for_statement",
        "for_in_statement",
        "catch_clause",
        "class_static_block",
    }
)
SCOPE_TYPES = FUNCTION_TYPES | _BLOCK_SCOPES


def scope_of(node: Any) -> Scope:
    """Scope opened by ``node`` itself; the program is the module scope."""
    return None if node.type == "program" else (node.start_byte, node.end_byte)


def enclosing_scope(node: Any, *, function_only: bool = False) -> Scope:
    """Innermost scope around ``node``, skipping blocks when ``function_only``."""
    parent = node.parent
    while parent is not None:
        if parent.type in FUNCTION_TYPES or (not function_only and parent.type in _BLOCK_SCOPES):
            return scope_of(parent)
        parent = parent.parent
    return None


def key_name(node: Any) -> str | None:
    """Static name of an object key or type member; None for computed keys."""
    if node is None:
        return None
    if node.type in (
        "property_identifier",
        "identifier",
        "private_property_identifier",
        "shorthand_property_identifier",
        "type_identifier",
    ):
        return node_text(node)
    if node.type == "string":
        text = node_text(node)
        return text[1:-1] if len(text) >= 2 else None
    if node.type == "number":
        return node_text(node)
    return None


def is_required_value(node: Any) -> bool:
    """True when a runtime prop-type expression ends in ``.isRequired``."""
    node = unwrap_parens(node)
    if node is None or node.type != "member_expression":
        return False
    prop = node.child_by_field_name("property")
    return prop is not None and node_text(prop) == REQUIRED_MARKER


def lower_value(node: Any) -> DeclForm:
    """Lower a value-position expression (propTypes / defaultProps initializer)."""
    node = unwrap_parens(node)
    if node is None:
        return OpaqueForm("missing expression")

    while node.type in _TRANSPARENT_EXPRESSIONS:
        inner = named_children(node)
        if not inner:
            return OpaqueForm(node.type)
        node = unwrap_parens(inner[0])

    if node.type == "object":
        return lower_object(node)
    if node.type == "identifier":
        return RefForm(node_text(node), "value", enclosing_scope(node))
    if node.type == "call_expression":
        return _lower_call(node)
    return OpaqueForm(node.type)


def _lower_call(node: Any) -> DeclForm:
    callee = dotted_name(node.child_by_field_name("function"))
    if callee is None:
        return OpaqueForm("dynamic call")
    args = node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return CallForm(callee)
    values = named_children(args)
    if not values or values[0].type == "spread_element":
        return CallForm(callee)
    return CallForm(callee, lower_value(values[0]))


def lower_object(node: Any) -> ObjectForm:
    members: list[Member] = []
    spread = False
    computed = False
    for child in named_children(node):
        if child.type == "spread_element":
            spread = True
            continue
        if child.type == "shorthand_property_identifier":
            members.append(Member(node_text(child), True, Location.of(child)))
            continue

        if child.type == "pair":
            name = key_name(child.child_by_field_name("key"))
            optional = not is_required_value(child.child_by_field_name("value"))
        elif child.type == "method_definition":
            name = key_name(child.child_by_field_name("name"))
            optional = True
        else:
            name = None
        if name is None:
            computed = True
            continue
        members.append(Member(name, optional, Location.of(child)))
    return ObjectForm(tuple(members), spread=spread, computed=computed)


def lower_type(node: Any) -> DeclForm:
    """Lower a type-position node (annotation, alias value, interface)."""
    node = unwrap_parens(node)
    if node is None:
        return OpaqueForm("missing type")

    if node.type == "type_annotation":
        inner = named_children(node)
        return lower_type(inner[0]) if inner else OpaqueForm("empty annotation")
    if node.type in ("object_type", "interface_body"):
        return lower_object_type(node)
    if node.type == "interface_declaration":
        return lower_interface(node)
    if node.type == "union_type":
        return UnionForm(tuple(lower_type(member) for member in _union_members(node)))
    if node.type == "type_identifier":
        return RefForm(node_text(node), "type", enclosing_scope(node))
    return OpaqueForm(node.type)


def _union_members(node: Any) -> Iterator[Any]:
    """Flatten the left-nested ``union_type`` chain produced by the grammar."""
    for child in named_children(node):
        child = unwrap_parens(child)
        if child.type == "union_type":
            yield from _union_members(child)
        else:
            yield child


def lower_object_type(node: Any) -> ObjectForm:
    members: list[Member] = []
    computed = False
    for child in named_children(node):
        if child.type in ("call_signature", "construct_signature"):
            continue
        if child.type not in ("property_signature", "method_signature"):
            # index signatures and anything unknown cannot be enumerated
            computed = True
            continue
        name = key_name(child.child_by_field_name("name"))
        if name is None:
            computed = True
            continue
        members.append(Member(name, "?" in child_types(child), Location.of(child)))
    return ObjectForm(tuple(members), computed=computed)


def lower_interface(node: Any) -> DeclForm:
    body = node.child_by_field_name("body")
    if body is None:
        return OpaqueForm("interface without body")
    shape = lower_object_type(body)
    if "extends_type_clause" in child_types(node):
        return ObjectForm(shape.members, spread=True, computed=shape.computed)
    return shape


def lower_accessor(function: Any) -> AccessorForm:
    """Lower a getter / getDefaultProps body to the form it returns.

    Only a body made of one unconditional ``return <expr>`` qualifies; an
    arrow function's concise body counts as such a return.
    """
    body = function.child_by_field_name("body")
    if body is None:
        return AccessorForm()
    if body.type != "statement_block":
        return AccessorForm(lower_value(body))
    statements = named_children(body)
    if len(statements) != 1 or statements[0].type != "return_statement":
        return AccessorForm()
    returned = named_children(statements[0])
    if len(returned) != 1:
        return AccessorForm()
    return AccessorForm(lower_value(returned[0]))


def lower_method(node: Any, name: str) -> AccessorForm | MethodForm:
    """A method using a declaration name: getters unwrap, plain methods do not."""
    types = child_types(node)
    if "get" in types or "static get" in types:
        return lower_accessor(node)
    return MethodForm(name)


def is_static(node: Any) -> bool:
    types = child_types(node)
    return "static" in types or "static get" in types


def own_body_nodes(body: Any) -> Iterator[Any]:
    """Walk a function body without entering nested functions or classes."""
    stack = list(reversed(body.children))
    while stack:
        current = stack.pop()
        yield current
        if current.type in _NESTED_BOUNDARIES:
            continue
        stack.extend(reversed(current.children))


def is_jsx(node: Any) -> bool:
    node = unwrap_parens(node)
    if node is None:
        return False
    if node.type in _JSX_TYPES:
        return True
    if node.type == "ternary_expression":
        return is_jsx(node.child_by_field_name("consequence")) or is_jsx(
            node.child_by_field_name("alternative")
        )
    if node.type == "binary_expression":
        return is_jsx(node.child_by_field_name("left")) or is_jsx(node.child_by_field_name("right"))
    return False


def returns_jsx(function: Any) -> bool:
    """True when a function hands back JSX from its own body."""
    body = function.child_by_field_name("body")
    if body is None:
        return False
    if body.type != "statement_block":
        return is_jsx(body)
    for node in own_body_nodes(body):
        if node.type == "return_statement":
            returned = named_children(node)
            if returned and is_jsx(returned[0]):
                return True
    return False
