"""Tests for components/scope.py module."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from propcontract.components.lowering import scope_of
from propcontract.components.scope import build_binding_table
from propcontract.contract.bindings import BindingTable, Unresolvable
from propcontract.contract.forms import ObjectForm, RefForm
from propcontract.parsing.treesitter import TreeSitterParser, walk


def parse_table(parser: TreeSitterParser, source: str, filename: str = "a.tsx") -> tuple[Any, BindingTable]:
    result = parser.parse(Path(filename), source.encode())
    assert not result.has_errors
    return result.root_node, build_binding_table(result.root_node)


def table_for(parser: TreeSitterParser, source: str, filename: str = "a.tsx") -> BindingTable:
    return parse_table(parser, source, filename)[1]


class TestBuildBindingTable:
    """Tests for build_binding_table function."""

    def test_const_with_initializer(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "const types = { foo: PropTypes.string };\n")

        assert isinstance(table.lookup("value", "types"), ObjectForm)

    def test_alias(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "const a = { foo: 1 };\nconst b = a;\n")

        assert table.lookup("value", "b") == RefForm("a")

    def test_declaration_without_initializer(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "let types;\n")

        assert table.lookup("value", "types") is Unresolvable.EXTERNAL

    def test_reassignment_is_multiple(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "let types = { foo: 1 };\ntypes = { bar: 2 };\n")

        assert table.lookup("value", "types") is Unresolvable.MULTIPLE

    def test_member_write_is_multiple(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "const types = { foo: 1 };\ntypes.bar = 2;\n")

        assert table.lookup("value", "types") is Unresolvable.MULTIPLE

    def test_imports_are_external(self, parser: TreeSitterParser) -> None:
        source = "import shared, { other as renamed } from './shared';\nimport * as ns from 'ns';\n"
        table = table_for(parser, source)

        for name in ("shared", "renamed", "ns"):
            assert table.lookup("value", name) is Unresolvable.EXTERNAL
        assert table.lookup("type", "shared") is Unresolvable.EXTERNAL

    def test_parameters_are_external(self, parser: TreeSitterParser) -> None:
        root, table = parse_table(parser, "function f(types, { a, b: c }, d = 1, ...rest) {}\n")
        scope = scope_of(root.named_children[0])

        for name in ("types", "a", "c", "d", "rest"):
            assert table.lookup("value", name, scope) is Unresolvable.EXTERNAL
            assert table.lookup("value", name) is None

    def test_single_arrow_parameter(self, parser: TreeSitterParser) -> None:
        root, table = parse_table(parser, "const g = x => x;\n")
        [arrow] = [n for n in walk(root) if n.type == "arrow_function"]

        assert table.lookup("value", "x", scope_of(arrow)) is Unresolvable.EXTERNAL
        assert table.lookup("value", "x") is None

    def test_type_alias_and_interface(self, parser: TreeSitterParser) -> None:
        source = "type Props = { foo?: string };\ninterface Other { bar?: string }\n"
        table = table_for(parser, source)

        assert isinstance(table.lookup("type", "Props"), ObjectForm)
        assert isinstance(table.lookup("type", "Other"), ObjectForm)
        assert table.lookup("value", "Props") is None

    def test_type_and_value_namespaces(self, parser: TreeSitterParser) -> None:
        """A type and a value may share a name without poisoning each other."""
        source = "type Props = { foo?: string };\nconst Props = { foo: 1 };\n"
        table = table_for(parser, source)

        assert isinstance(table.lookup("type", "Props"), ObjectForm)
        assert isinstance(table.lookup("value", "Props"), ObjectForm)

    def test_destructured_declaration(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "const { propTypes } = Other;\n")

        assert table.lookup("value", "propTypes") is Unresolvable.EXTERNAL


class TestScopes:
    """Declarations are visible from their own scope outward."""

    def test_parameter_does_not_poison_module_name(self, parser: TreeSitterParser) -> None:
        source = "const props = { foo: 1 };\nfunction Hello(props) {\n  return props;\n}\n"
        root, table = parse_table(parser, source)
        function = root.named_children[1]

        assert isinstance(table.lookup("value", "props"), ObjectForm)
        assert table.lookup("value", "props", scope_of(function)) is Unresolvable.EXTERNAL

    def test_inner_declaration_shadows_outer(self, parser: TreeSitterParser) -> None:
        source = "const types = { foo: 1 };\nfunction f() {\n  const types = { bar: 2 };\n}\n"
        root, table = parse_table(parser, source)
        [body] = [n for n in walk(root) if n.type == "statement_block"]

        outer = table.lookup("value", "types")
        inner = table.lookup("value", "types", scope_of(body))
        assert isinstance(outer, ObjectForm) and outer.members[0].name == "foo"
        assert isinstance(inner, ObjectForm) and inner.members[0].name == "bar"

    def test_outer_name_visible_from_nested_block(self, parser: TreeSitterParser) -> None:
        source = "const types = { foo: 1 };\nfunction f() {\n  if (x) {\n    use(types);\n  }\n}\n"
        root, table = parse_table(parser, source)
        innermost = [n for n in walk(root) if n.type == "statement_block"][-1]

        assert isinstance(table.lookup("value", "types", scope_of(innermost)), ObjectForm)

    def test_redeclaration_in_same_scope_is_multiple(self, parser: TreeSitterParser) -> None:
        table = table_for(parser, "var types = { foo: 1 };\nvar types = { bar: 2 };\n")

        assert table.lookup("value", "types") is Unresolvable.MULTIPLE

    def test_var_is_hoisted_to_function(self, parser: TreeSitterParser) -> None:
        source = "function f() {\n  if (x) {\n    var types = { foo: 1 };\n  }\n}\n"
        root, table = parse_table(parser, source)

        assert isinstance(table.lookup("value", "types", scope_of(root.named_children[0])), ObjectForm)

    def test_write_in_inner_scope_poisons_outer_binding(self, parser: TreeSitterParser) -> None:
        source = "let types = { foo: 1 };\nfunction f() {\n  types = {};\n}\n"

        assert table_for(parser, source).lookup("value", "types") is Unresolvable.MULTIPLE

    def test_write_to_shadowing_name_leaves_outer_binding(self, parser: TreeSitterParser) -> None:
        source = "const types = { foo: 1 };\nfunction f(types) {\n  types = {};\n}\n"

        assert isinstance(table_for(parser, source).lookup("value", "types"), ObjectForm)

    def test_write_before_hoisted_declaration(self, parser: TreeSitterParser) -> None:
        source = "const types = { foo: 1 };\nfunction f() {\n  types = {};\n  var types;\n}\n"

        assert isinstance(table_for(parser, source).lookup("value", "types"), ObjectForm)

    def test_loop_variable(self, parser: TreeSitterParser) -> None:
        source = "const item = { foo: 1 };\nfor (const item of items) {\n  use(item);\n}\n"

        assert isinstance(table_for(parser, source).lookup("value", "item"), ObjectForm)

    def test_reference_carries_its_scope(self, parser: TreeSitterParser) -> None:
        source = "function f() {\n  const b = a;\n}\n"
        root, table = parse_table(parser, source)
        [body] = [n for n in walk(root) if n.type == "statement_block"]

        ref = table.lookup("value", "b", scope_of(body))
        assert isinstance(ref, RefForm)
        assert ref.scope == scope_of(body)
