"""Lint models - diagnostics and results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Literal

from propcontract.contract.models import Violation, ViolationKind

RULE_NAME = "require-default-props"

_MESSAGES: dict[ViolationKind, tuple[str, str]] = {
    ViolationKind.MISSING_DEFAULT: (
        "shouldHaveDefault",
        'propType "{name}" is not required, but has no corresponding defaultProps declaration.',
    ),
    ViolationKind.DEFAULT_ON_REQUIRED: (
        "noDefaultWithRequired",
        'propType "{name}" is required and should not have a defaultProps declaration.',
    ),
}


class Severity(Enum):
    """Diagnostic severity level."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single reported violation."""

    path: str
    line: int
    column: int
    message: str
    code: str  # "shouldHaveDefault", "noDefaultWithRequired"
    rule: str = RULE_NAME
    severity: Severity = Severity.ERROR

    @classmethod
    def from_violation(cls, path: str, violation: Violation, severity: Severity) -> Diagnostic:
        code, template = _MESSAGES[violation.kind]
        return cls(
            path=path,
            line=violation.location.line,
            column=violation.location.column,
            message=template.format(name=violation.property_name),
            code=code,
            severity=severity,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass
class FileResult:
    """Result of checking a single file."""

    path: str
    status: Literal["clean", "dirty", "error", "skipped"]
    diagnostics: list[Diagnostic] = field(default_factory=list)
    components_checked: int = 0
    error_detail: str | None = None  # If status is "error" or "skipped"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "components_checked": self.components_checked,
            "error_detail": self.error_detail,
        }


@dataclass
class LintResult:
    """Aggregated result of a check run."""

    files: list[FileResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for f in self.files for d in f.diagnostics]

    @property
    def total_diagnostics(self) -> int:
        return sum(len(f.diagnostics) for f in self.files)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for f in self.files for d in f.diagnostics)

    @property
    def status(self) -> Literal["clean", "dirty", "error"]:
        if any(f.status == "error" for f in self.files):
            return "error"
        if any(f.status == "dirty" for f in self.files):
            return "dirty"
        return "clean"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "total_diagnostics": self.total_diagnostics,
            "duration_seconds": round(self.duration_seconds, 3),
            "files": [f.to_dict() for f in self.files],
        }
