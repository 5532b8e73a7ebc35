"""Directory exclusion for source discovery.

Tier 0 (HARDCODED_DIRS): Never traversed, not user-configurable.
    - VCS internals

Tier 1 (DEFAULT_PRUNABLE_DIRS): Excluded by default.
    - Dependencies, caches, build outputs of JS/TS projects
    - Extended per project via ``discovery.exclude_dirs``
"""

from __future__ import annotations

from collections.abc import Iterable

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # JavaScript/Node.js ecosystem
        # -------------------------------------------------------------------------
        "node_modules",
        ".npm",
        ".yarn",
        ".pnpm-store",
        "bower_components",
        ".next",  # Next.js build
        ".nuxt",  # Nuxt.js build
        ".turbo",  # Turborepo cache
        ".parcel-cache",
        ".svelte-kit",
        "storybook-static",
        # -------------------------------------------------------------------------
        # Generic build/output directories
        # -------------------------------------------------------------------------
        "dist",
        "build",
        "out",
        "coverage",
        ".nyc_output",
        # -------------------------------------------------------------------------
        # IDE/Editor directories
        # -------------------------------------------------------------------------
        ".idea",
        ".vscode",
        # -------------------------------------------------------------------------
        # Misc caches
        # -------------------------------------------------------------------------
        ".cache",
        ".venv",
        "__pycache__",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_hardcoded_dir(dirname: str) -> bool:
    """Check if directory is hardcoded (never traversable, not overridable)."""
    return dirname in HARDCODED_DIRS


def is_default_prunable(dirname: str) -> bool:
    return dirname in DEFAULT_PRUNABLE_DIRS


def prunable_dirs(extra: Iterable[str] = ()) -> frozenset[str]:
    """Combined prune set: defaults plus project-configured directory names."""
    return PRUNABLE_DIRS | frozenset(extra)


__all__ = [
    "HARDCODED_DIRS",
    "DEFAULT_PRUNABLE_DIRS",
    "PRUNABLE_DIRS",
    "is_hardcoded_dir",
    "is_default_prunable",
    "prunable_dirs",
]
