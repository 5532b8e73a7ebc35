"""Tree-sitter parsing for JavaScript and TypeScript sources."""

from propcontract.parsing.packs import PACKS, LanguagePack, get_pack, get_pack_for_ext
from propcontract.parsing.treesitter import ParseResult, TreeSitterParser

__all__ = [
    "PACKS",
    "LanguagePack",
    "ParseResult",
    "TreeSitterParser",
    "get_pack",
    "get_pack_for_ext",
]
