"""Config module exports."""

from propcontract.config.loader import load_config
from propcontract.config.models import (
    DetectionConfig,
    DiscoveryConfig,
    LoggingConfig,
    PropContractConfig,
    RuleConfig,
)

__all__ = [
    "load_config",
    "PropContractConfig",
    "RuleConfig",
    "DetectionConfig",
    "DiscoveryConfig",
    "LoggingConfig",
]
