"""propcontract error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse

Unresolvable declarations are never errors: the contract core degrades
them to an opaque outcome and stays silent. These types cover the
surrounding tool only (configuration, file access, grammar loading).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Parse (3xxx)
    PARSE_UNSUPPORTED_LANGUAGE = 3001
    PARSE_GRAMMAR_UNAVAILABLE = 3002
    PARSE_READ_ERROR = 3003


@dataclass(frozen=True, slots=True)
class PropContractError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PropContractError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ParseError(PropContractError):
    """Source file could not be handed to a grammar."""

    @classmethod
    def unsupported_language(cls, path: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNSUPPORTED_LANGUAGE,
            message=f"Unsupported file extension: {path}",
            details={"path": path},
        )

    @classmethod
    def grammar_unavailable(cls, grammar: str, package: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_GRAMMAR_UNAVAILABLE,
            message=f"Language not available: {grammar} (install {package})",
            details={"grammar": grammar, "package": package},
        )

    @classmethod
    def read_error(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_READ_ERROR,
            message=f"Cannot read {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )
