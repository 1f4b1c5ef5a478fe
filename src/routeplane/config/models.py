"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (ROUTEPLANE__SECTION__KEY)
3. Repo YAML (.routeplane/config.yaml)
4. Global YAML (~/.config/routeplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    ROUTEPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    ROUTEPLANE__LOGGING__LEVEL=DEBUG
    ROUTEPLANE__SCAN__FILE_PATTERNS='["src/**/*.ts"]'
    ROUTEPLANE__WATCHER__DEBOUNCE_SEC=0.2
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

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
        ROUTEPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every parsed file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Which files are scanned for controllers.

    Both lists use glob syntax relative to each workspace root. Empty lists
    are valid: no include patterns means no files are scanned.

    Env vars:
        ROUTEPLANE__SCAN__FILE_PATTERNS: JSON list of include globs
        ROUTEPLANE__SCAN__EXCLUDE_PATTERNS: JSON list of exclude globs
    """

    file_patterns: list[str] = Field(
        default_factory=lambda: ["**/*.controller.ts"],
        description="Include globs. Files matching any of these are parsed.",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: ["**/node_modules/**", "**/dist/**"],
        description="Exclude globs. Matching directories are not descended into.",
    )

    @field_validator("file_patterns", "exclude_patterns")
    @classmethod
    def strip_blank_patterns(cls, v: list[str]) -> list[str]:
        return [p.strip() for p in v if p.strip()]


class WatcherConfig(BaseModel):
    """File watcher configuration.

    Env vars:
        ROUTEPLANE__WATCHER__DEBOUNCE_SEC: Quiet window before a refresh
    """

    debounce_sec: float = Field(
        default=0.5,
        description="Debounce window. Saves inside it share one refresh.",
    )

    @field_validator("debounce_sec")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Must be positive, got {v}")
        return v


class RoutePlaneConfig(BaseModel):
    """Root configuration for RoutePlane."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
