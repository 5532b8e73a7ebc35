"""Tree-sitter parsing for component source files.

Provides:
- Grammar loading driven by LanguagePack metadata
- Parsing with error accounting (files with syntax errors are not analysed)
- Small node helpers shared by lowering and component detection

Node helpers use only the generic tree-sitter node API and serve the
javascript, typescript and tsx grammars alike.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from propcontract.core.errors import ParseError
from propcontract.parsing.packs import LanguagePack, get_pack, get_pack_for_ext


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


@dataclass
class TreeSitterParser:
    """
    Tree-sitter parser for JavaScript, TypeScript and TSX.

    Not thread-safe: give each worker thread its own instance.

    Usage::

        parser = TreeSitterParser()
        result = parser.parse(Path("src/Button.tsx"), content)
        if not result.has_errors:
            ...
    """

    typed_javascript: bool = False
    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, pack: LanguagePack) -> Any:
        """Get or load a Tree-sitter language from its pack."""
        if pack.grammar_name in self._languages:
            return self._languages[pack.grammar_name]

        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func or "language")
        except (ImportError, AttributeError) as err:
            raise ParseError.grammar_unavailable(
                pack.grammar_name, f"{pack.grammar_package}>={pack.min_version}"
            ) from err

        lang = tree_sitter.Language(lang_fn())
        self._languages[pack.grammar_name] = lang
        return lang

    def pack_for(self, path: Path) -> LanguagePack | None:
        return get_pack_for_ext(path.suffix, typed_javascript=self.typed_javascript)

    def parse(self, path: Path, content: bytes | None = None, *, language: str | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file (used for language detection)
            content: File content as bytes. If None, reads from path.
            language: Force a pack by name instead of detecting from extension.

        Returns:
            ParseResult with tree, language, and error info.
        """
        pack = get_pack(language) if language else self.pack_for(path)
        if pack is None:
            raise ParseError.unsupported_language(str(path))

        if content is None:
            try:
                content = path.read_bytes()
            except OSError as e:
                raise ParseError.read_error(str(path), str(e)) from e

        self._parser.language = self._get_language(pack)
        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0
        for node in walk(tree.root_node):
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1

        return ParseResult(
            tree=tree,
            language=pack.name,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
        )


def walk(node: Any) -> Iterator[Any]:
    """Pre-order traversal without recursion (deeply nested JSX is common)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Any) -> str:
    return node.text.decode("utf-8") if node is not None and node.text else ""


def child_types(node: Any) -> set[str]:
    """Types of all direct children, including anonymous keyword tokens."""
    return {child.type for child in node.children}


def named_children(node: Any) -> list[Any]:
    """Named children with comments filtered out."""
    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parens(node: Any) -> Any:
    """Strip parenthesized_expression / parenthesized_type wrappers."""
    while node is not None and node.type in ("parenthesized_expression", "parenthesized_type"):
        inner = named_children(node)
        if len(inner) != 1:
            return node
        node = inner[0]
    return node


def dotted_name(node: Any) -> str | None:
    """Return ``a.b.c`` for identifier / member chains, None for anything else."""
    if node is None:
        return None
    if node.type in ("identifier", "type_identifier", "property_identifier", "this"):
        return node_text(node)
    if node.type == "member_expression":
        obj = dotted_name(node.child_by_field_name("object"))
        prop = node.child_by_field_name("property")
        if obj is None or prop is None or prop.type != "property_identifier":
            return None
        return f"{obj}.{node_text(prop)}"
    if node.type == "nested_type_identifier":
        module = dotted_name(node.child_by_field_name("module"))
        name = node.child_by_field_name("name")
        if module is None or name is None:
            return None
        return f"{module}.{node_text(name)}"
    return None
