"""Lint module - diagnostics for the default-props contract."""

from propcontract.lint.models import RULE_NAME, Diagnostic, FileResult, LintResult, Severity
from propcontract.lint.ops import LintOps

__all__ = [
    "RULE_NAME",
    "Diagnostic",
    "FileResult",
    "LintOps",
    "LintResult",
    "Severity",
]
