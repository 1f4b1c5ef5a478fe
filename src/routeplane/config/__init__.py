"""Config module exports."""

from routeplane.config.loader import RoutePlaneSettings, load_config
from routeplane.config.models import (
    LoggingConfig,
    RoutePlaneConfig,
    ScanConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "RoutePlaneConfig",
    "RoutePlaneSettings",
    "ScanConfig",
    "WatcherConfig",
    "LoggingConfig",
]
