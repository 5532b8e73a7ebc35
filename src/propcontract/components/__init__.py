"""Component detection and lowering of tree-sitter nodes to declaration forms."""

from propcontract.components.registry import find_components
from propcontract.components.scope import build_binding_table

__all__ = [
    "build_binding_table",
    "find_components",
]
