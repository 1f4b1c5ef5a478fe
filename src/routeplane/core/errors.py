"""RoutePlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index (parse and scan failures)
- 4xxx: Navigation
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index (3xxx)
    PARSE_UNREADABLE_SOURCE = 3001
    PARSE_UNSUPPORTED_LANGUAGE = 3002
    SCAN_ROOT_MISSING = 3101
    SCAN_FILE_FAILED = 3102

    # Navigation (4xxx)
    NAVIGATION_TARGET_MISSING = 4001


@dataclass(frozen=True, slots=True)
class RoutePlaneError(Exception):
    """Base error with structured context for UI responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(RoutePlaneError):
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


class ParseError(RoutePlaneError):
    """A single file could not be turned into a controller descriptor.

    Always recovered by the parser entrypoints; callers only see ``None``.
    """

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNREADABLE_SOURCE,
            message=f"Cannot read source {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unsupported_language(cls, path: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNSUPPORTED_LANGUAGE,
            message=f"No grammar for {path}",
            details={"path": path},
        )


class ScanError(RoutePlaneError):
    """Workspace enumeration problems, isolated per root or per file."""

    @classmethod
    def root_missing(cls, root: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_ROOT_MISSING,
            message=f"Workspace root does not exist: {root}",
            details={"root": root},
        )

    @classmethod
    def file_failed(cls, path: str, reason: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_FILE_FAILED,
            message=f"Scanning {path} failed: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )


class NavigationError(RoutePlaneError):
    """Jump targets that no longer exist."""

    @classmethod
    def target_missing(cls, path: str) -> "NavigationError":
        return cls(
            code=ErrorCode.NAVIGATION_TARGET_MISSING,
            message=f"Failed to open file: {path}",
            details={"path": path},
        )
