"""LanguagePack: single source of truth for tree-sitter grammar config.

Every language propcontract can check has exactly ONE LanguagePack that
holds grammar install metadata (package, module, loader function) and
file extension detection.

The PACKS registry is the canonical lookup: ``PACKS["tsx"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LanguagePack:
    """Tree-sitter configuration for a single language."""

    # -- Identity --
    name: str  # Canonical language name ("javascript", "typescript", "tsx")
    grammar_name: str  # tree-sitter grammar key

    # -- Grammar install --
    grammar_package: str  # PyPI package ("tree-sitter-typescript")
    grammar_module: str  # Python import ("tree_sitter_typescript")
    min_version: str
    # Non-standard function name (e.g. "language_typescript", "language_tsx")
    language_func: str | None = None

    # -- File detection --
    extensions: frozenset[str] = field(default_factory=frozenset)


JAVASCRIPT_PACK = LanguagePack(
    name="javascript",
    grammar_name="javascript",
    grammar_package="tree-sitter-javascript",
    grammar_module="tree_sitter_javascript",
    min_version="0.23.0",
    extensions=frozenset({"js", "jsx", "mjs", "cjs"}),
)

TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    grammar_name="typescript",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    min_version="0.23.0",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
)

TSX_PACK = LanguagePack(
    name="tsx",
    grammar_name="tsx",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    min_version="0.23.0",
    language_func="language_tsx",
    extensions=frozenset({"tsx"}),
)

PACKS: dict[str, LanguagePack] = {
    pack.name: pack for pack in (JAVASCRIPT_PACK, TYPESCRIPT_PACK, TSX_PACK)
}

_EXT_INDEX: dict[str, LanguagePack] = {
    ext: pack for pack in PACKS.values() for ext in pack.extensions
}


def get_pack(name: str) -> LanguagePack | None:
    return PACKS.get(name)


def get_pack_for_ext(ext: str, *, typed_javascript: bool = False) -> LanguagePack | None:
    """Return the pack for a file extension (without dot).

    With ``typed_javascript`` the JavaScript extensions are routed to the
    TSX grammar, which accepts type annotations alongside JSX.
    """
    pack = _EXT_INDEX.get(ext.lower().lstrip("."))
    if pack is JAVASCRIPT_PACK and typed_javascript:
        return TSX_PACK
    return pack


def all_extensions() -> frozenset[str]:
    return frozenset(_EXT_INDEX)
