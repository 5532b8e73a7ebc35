"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local propcontract package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of propcontract modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("propcontract"):
        del sys.modules[module_name]

from propcontract.parsing.treesitter import TreeSitterParser  # noqa: E402


@pytest.fixture
def parser() -> TreeSitterParser:
    """Parser for tests that need a real tree."""
    return TreeSitterParser()


@pytest.fixture
def typed_parser() -> TreeSitterParser:
    """Parser that reads .js/.jsx with the TSX grammar."""
    return TreeSitterParser(typed_javascript=True)
