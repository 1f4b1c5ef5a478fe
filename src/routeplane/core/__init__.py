"""Core module exports."""

from routeplane.core.errors import (
    ConfigError,
    ErrorCode,
    NavigationError,
    ParseError,
    RoutePlaneError,
    ScanError,
)
from routeplane.core.logging import (
    clear_refresh_id,
    configure_logging,
    get_logger,
    get_refresh_id,
    set_refresh_id,
)

__all__ = [
    # Errors
    "ErrorCode",
    "RoutePlaneError",
    "ConfigError",
    "ParseError",
    "ScanError",
    "NavigationError",
    # Logging
    "clear_refresh_id",
    "configure_logging",
    "get_logger",
    "get_refresh_id",
    "set_refresh_id",
]
