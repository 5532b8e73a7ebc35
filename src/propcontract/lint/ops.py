"""Lint operations - discover sources and check their component contracts."""

from __future__ import annotations

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from propcontract.components import build_binding_table, find_components
from propcontract.config.models import PropContractConfig
from propcontract.contract.checker import check_components
from propcontract.core.errors import ErrorCode, ParseError
from propcontract.core.excludes import prunable_dirs
from propcontract.core.logging import get_logger
from propcontract.lint.models import Diagnostic, FileResult, LintResult, Severity
from propcontract.parsing.treesitter import TreeSitterParser

log = get_logger("lint")


class LintOps:
    """Check operations for a source tree.

    Parsers are not thread-safe, so each worker thread lazily creates its
    own. Results always come back in discovery order regardless of how
    many workers ran.
    """

    def __init__(self, root: Path, config: PropContractConfig | None = None) -> None:
        self._root = root
        self._config = config or PropContractConfig()
        self._local = threading.local()

    @property
    def config(self) -> PropContractConfig:
        return self._config

    def _parser(self) -> TreeSitterParser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = TreeSitterParser(typed_javascript=self._config.discovery.typed_javascript)
            self._local.parser = parser
        return parser

    def _display_path(self, path: Path) -> str:
        try:
            return path.relative_to(self._root).as_posix()
        except ValueError:
            return path.as_posix()

    def _wanted(self, path: Path) -> bool:
        return path.suffix.lower().lstrip(".") in self._config.discovery.extensions

    def discover(self, paths: list[str] | None = None) -> list[Path]:
        """Resolve paths to the sorted list of source files to check.

        Directories are walked with pruning; files named explicitly are kept
        even inside pruned directories, as long as their extension is wanted.
        """
        pruned = prunable_dirs(self._config.discovery.exclude_dirs)
        targets = [self._root / p for p in paths] if paths else [self._root]

        found: set[Path] = set()
        for target in targets:
            if target.is_file():
                if self._wanted(target):
                    found.add(target)
                continue
            if not target.is_dir():
                log.warning("path_not_found", path=str(target))
                continue
            for dirpath, dirnames, filenames in os.walk(target):
                dirnames[:] = [d for d in dirnames if d not in pruned]
                for filename in filenames:
                    candidate = Path(dirpath) / filename
                    if self._wanted(candidate):
                        found.add(candidate)
        return sorted(found)

    def check_source(self, path: Path, content: bytes | str) -> FileResult:
        """Check in-memory source as if it lived at ``path``."""
        display = self._display_path(path)
        data = content.encode("utf-8") if isinstance(content, str) else content

        try:
            result = self._parser().parse(path, data)
        except ParseError as e:
            if e.code == ErrorCode.PARSE_UNSUPPORTED_LANGUAGE:
                return FileResult(path=display, status="skipped", error_detail=e.message)
            log.warning("file_parse_failed", path=display, error=e.message)
            return FileResult(path=display, status="error", error_detail=e.message)

        if result.has_errors:
            log.debug("file_skipped", path=display, syntax_errors=result.error_count)
            return FileResult(
                path=display,
                status="skipped",
                error_detail=f"{result.error_count} syntax error(s)",
            )

        table = build_binding_table(result.root_node)
        components = find_components(result, self._config.detection)
        violations = check_components(components, table, self._config.rule)

        severity = Severity(self._config.rule.severity)
        diagnostics = [Diagnostic.from_violation(display, v, severity) for v in violations]
        return FileResult(
            path=display,
            status="dirty" if diagnostics else "clean",
            diagnostics=diagnostics,
            components_checked=len(components),
        )

    def check_file(self, path: Path) -> FileResult:
        display = self._display_path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            err = ParseError.read_error(display, str(e))
            log.warning("file_read_failed", path=display, error=str(e))
            return FileResult(path=display, status="error", error_detail=err.message)
        return self.check_source(path, content)

    def check(self, paths: list[str] | None = None) -> LintResult:
        """Check every source file under ``paths`` (default: the whole root)."""
        start_time = time.time()
        files = self.discover(paths)

        workers = max(1, min(self._config.discovery.max_workers, len(files)))
        if workers == 1:
            results = [self.check_file(f) for f in files]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="propcontract-check") as executor:
                results = list(executor.map(self.check_file, files))

        lint_result = LintResult(files=results, duration_seconds=time.time() - start_time)
        log.info(
            "check_complete",
            files=len(results),
            diagnostics=lint_result.total_diagnostics,
            workers=workers,
            duration_seconds=round(lint_result.duration_seconds, 3),
        )
        return lint_result
