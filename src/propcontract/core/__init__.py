"""Core module exports."""

from propcontract.core.errors import (
    ConfigError,
    ErrorCode,
    ParseError,
    PropContractError,
)
from propcontract.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from propcontract.core.progress import spinner, status

__all__ = [
    # Errors
    "PropContractError",
    "ConfigError",
    "ErrorCode",
    "ParseError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "spinner",
    "status",
]
