"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PROPCONTRACT__SECTION__KEY)
3. Project YAML (.propcontract.yaml)
4. Global YAML (~/.config/propcontract/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PROPCONTRACT__<SECTION>__<KEY>=<VALUE>

Examples:
    PROPCONTRACT__LOGGING__LEVEL=DEBUG
    PROPCONTRACT__RULE__FORBID_DEFAULT_FOR_REQUIRED=true
    PROPCONTRACT__DISCOVERY__MAX_WORKERS=4
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PROPCONTRACT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG reports every skipped component and why.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RuleConfig(BaseModel):
    """Policy for the default-props contract.

    Env vars:
        PROPCONTRACT__RULE__IGNORE_FUNCTIONAL_COMPONENTS
        PROPCONTRACT__RULE__FORBID_DEFAULT_FOR_REQUIRED
        PROPCONTRACT__RULE__SEVERITY
    """

    model_config = ConfigDict(extra="forbid")

    ignore_functional_components: bool = Field(
        default=False,
        description="Skip plain function/arrow components entirely. "
        "Class and factory components are still checked.",
    )
    forbid_default_for_required: bool = Field(
        default=False,
        description="Also report required props that declare a default.",
    )
    transparent_wrappers: list[str] = Field(
        default_factory=list,
        description="Call names unwrapped to their first argument, "
        "e.g. forbidExtraProps or exact.",
    )
    severity: Literal["error", "warning"] = Field(
        default="error",
        description="Severity attached to every reported violation.",
    )

    @field_validator("transparent_wrappers")
    @classmethod
    def validate_wrappers(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.strip():
                raise ValueError("Wrapper names must be non-empty")
        return [name.strip() for name in v]


class DetectionConfig(BaseModel):
    """How components are recognised.

    Env vars:
        PROPCONTRACT__DETECTION__PRAGMA: Namespace of the component library
    """

    model_config = ConfigDict(extra="forbid")

    pragma: str = Field(
        default="React",
        description="Library namespace, as in React.Component or React.FC.",
    )
    component_base_classes: list[str] = Field(
        default_factory=lambda: ["Component", "PureComponent"],
        description="Base classes that make a class a component, bare or pragma-qualified.",
    )
    factory_functions: list[str] = Field(
        default_factory=lambda: ["createReactClass"],
        description="Factory calls taking a component spec object. "
        "<pragma>.createClass is always recognised.",
    )
    function_component_types: list[str] = Field(
        default_factory=lambda: ["FC", "FunctionComponent", "VFC"],
        description="Type names whose first type argument declares a function component's props.",
    )


class DiscoveryConfig(BaseModel):
    """Source discovery and parsing.

    Env vars:
        PROPCONTRACT__DISCOVERY__TYPED_JAVASCRIPT: Parse .js/.jsx with the TSX grammar
        PROPCONTRACT__DISCOVERY__MAX_WORKERS: Parallel file workers
    """

    model_config = ConfigDict(extra="forbid")

    extensions: list[str] = Field(
        default_factory=lambda: ["js", "jsx", "mjs", "cjs", "ts", "tsx", "mts", "cts"],
        description="File extensions to check (without dot).",
    )
    exclude_dirs: list[str] = Field(
        default_factory=list,
        description="Directory names pruned in addition to node_modules, dist, build, etc.",
    )
    typed_javascript: bool = Field(
        default=False,
        description="Parse .js/.jsx with the TSX grammar so type annotations are understood.",
    )
    max_workers: int = Field(
        default=1,
        description="Files analysed in parallel. Each worker owns its own parser.",
    )

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext.lower().lstrip(".") for ext in v]

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class PropContractConfig(BaseModel):
    """Root configuration for propcontract.

    All settings can be configured via:
    1. Environment variables: PROPCONTRACT__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    rule: RuleConfig = Field(default_factory=RuleConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
