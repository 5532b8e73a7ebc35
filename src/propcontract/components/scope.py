"""Per-file binding table construction.

Declarations land in the scope JavaScript gives them: ``var`` in the nearest
function, ``let``/``const``/classes/types in the nearest block, parameters
in their function and imports in the module. A name declared twice in one
scope is ambiguous; a name reassigned or mutated anywhere is ambiguous in
the scope the write resolves to.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from propcontract.components.lowering import (
    SCOPE_TYPES,
    enclosing_scope,
    lower_interface,
    lower_type,
    lower_value,
    scope_of,
)
from propcontract.contract.bindings import BindingTable, BindingTableBuilder
from propcontract.contract.forms import Scope
from propcontract.parsing.treesitter import child_types, named_children, node_text, walk

_DECLARATION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "abstract_class_declaration",
        "enum_declaration",
    }
)

_PARAMETER_HOSTS = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
        "catch_clause",
    }
)

# Function expressions whose own name is visible only inside them.
_NAMED_EXPRESSIONS = frozenset({"function_expression", "function", "generator_function"})

_ASSIGNMENTS = frozenset({"assignment_expression", "augmented_assignment_expression"})


def pattern_names(node: Any) -> Iterator[str]:
    """Names bound by a declaration or parameter pattern."""
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        yield node_text(node)
        return
    if node.type == "type_annotation":
        return

    if node.type in ("assignment_pattern", "object_assignment_pattern"):
        children = [node.child_by_field_name("left")]
    elif node.type == "pair_pattern":
        children = [node.child_by_field_name("value")]
    elif node.type in ("required_parameter", "optional_parameter"):
        children = [node.child_by_field_name("pattern")]
    else:
        children = named_children(node)
    for child in children:
        if child is not None:
            yield from pattern_names(child)


def _root_identifier(node: Any) -> str | None:
    """``a`` for ``a``, ``a.b.c`` and ``a[b]``; None for anything else."""
    while node is not None and node.type in ("member_expression", "subscript_expression"):
        node = node.child_by_field_name("object")
    if node is not None and node.type == "identifier":
        return node_text(node)
    return None


def build_binding_table(root: Any) -> BindingTable:
    """Index every declaration of a parsed file by the scope it belongs to."""
    builder = BindingTableBuilder()

    for node in walk(root):
        if node.type in SCOPE_TYPES:
            builder.enter(scope_of(node), enclosing_scope(node))

        if node.type == "variable_declarator":
            _declare_variable(builder, node)
        elif node.type == "for_in_statement":
            _declare_loop_variable(builder, node)
        elif node.type == "import_clause":
            for child in walk(node):
                if child.type == "identifier":
                    builder.declare("value", node_text(child), None)
                    builder.declare("type", node_text(child), None)
        elif node.type == "type_alias_declaration":
            name = node.child_by_field_name("name")
            if name is not None:
                value = lower_type(node.child_by_field_name("value"))
                builder.declare("type", node_text(name), value, enclosing_scope(node))
        elif node.type == "interface_declaration":
            name = node.child_by_field_name("name")
            if name is not None:
                builder.declare("type", node_text(name), lower_interface(node), enclosing_scope(node))
        elif node.type == "update_expression":
            target = _root_identifier(node.child_by_field_name("argument"))
            if target is not None:
                builder.invalidate("value", target, enclosing_scope(node))
        elif node.type in _ASSIGNMENTS:
            target = _root_identifier(node.child_by_field_name("left"))
            if target is not None:
                builder.invalidate("value", target, enclosing_scope(node))

        if node.type in _DECLARATION_TYPES:
            name = node.child_by_field_name("name")
            if name is not None:
                scope = enclosing_scope(node)
                builder.declare("value", node_text(name), None, scope)
                if node.type != "function_declaration":
                    builder.declare("type", node_text(name), None, scope)
        elif node.type in _NAMED_EXPRESSIONS:
            name = node.child_by_field_name("name")
            if name is not None:
                builder.declare("value", node_text(name), None, scope_of(node))

        if node.type in _PARAMETER_HOSTS:
            _declare_parameters(builder, node)

    return builder.build()


def _declare_variable(builder: BindingTableBuilder, node: Any) -> None:
    name = node.child_by_field_name("name")
    if name is None:
        return
    hoisted = node.parent is not None and node.parent.type == "variable_declaration"
    scope = enclosing_scope(node, function_only=hoisted)
    if name.type != "identifier":
        for bound in pattern_names(name):
            builder.declare("value", bound, None, scope)
        return
    value = node.child_by_field_name("value")
    builder.declare("value", node_text(name), lower_value(value) if value is not None else None, scope)


def _declare_loop_variable(builder: BindingTableBuilder, node: Any) -> None:
    """``for (const x of xs)`` declares ``x``; ``for (x of xs)`` writes it."""
    left = node.child_by_field_name("left")
    if left is None:
        return
    keywords = child_types(node)
    if "var" in keywords:
        scope: Scope = enclosing_scope(node, function_only=True)
    elif "let" in keywords or "const" in keywords:
        scope = scope_of(node)
    else:
        target = _root_identifier(left)
        if target is not None:
            builder.invalidate("value", target, enclosing_scope(node))
        return
    for bound in pattern_names(left):
        builder.declare("value", bound, None, scope)


def _declare_parameters(builder: BindingTableBuilder, node: Any) -> None:
    scope = scope_of(node)
    single = node.child_by_field_name("parameter")
    if single is not None:
        for bound in pattern_names(single):
            builder.declare("value", bound, None, scope)
    params = node.child_by_field_name("parameters")
    if params is not None:
        for bound in pattern_names(params):
            builder.declare("value", bound, None, scope)
