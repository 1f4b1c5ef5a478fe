"""Resolve rpl's configuration for a workspace.

Layers, later ones overriding earlier ones key by key:

- built-in defaults from ``config.models``
- ``~/.config/routeplane/config.yaml``
- ``<workspace>/.routeplane/config.yaml``
- ``ROUTEPLANE__SECTION__KEY`` environment variables
- keyword arguments to ``load_config``

The watcher reloads the workspace file through ``load_config`` whenever it
changes, so a bad edit surfaces as a ``ConfigError`` rather than a crash.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from routeplane.config.models import (
    LoggingConfig,
    RoutePlaneConfig,
    ScanConfig,
    WatcherConfig,
)
from routeplane.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/routeplane/config.yaml").expanduser()
REPO_CONFIG_DIR = ".routeplane"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one config file; a missing or empty file contributes nothing."""
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _workspace_yaml(repo_root: Path) -> dict[str, Any]:
    layered = _load_yaml(GLOBAL_CONFIG_PATH)
    repo_file = _load_yaml(repo_root / REPO_CONFIG_DIR / "config.yaml")
    return _deep_merge(layered, repo_file) if repo_file else layered


class _YamlSource(PydanticBaseSettingsSource):
    """Feeds the merged YAML layers to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Settings class bound to one workspace's YAML layers."""

    class RoutePlaneSettings(BaseSettings):
        """Env vars: ROUTEPLANE__SCAN__FILE_PATTERNS, ROUTEPLANE__WATCHER__DEBOUNCE_SEC, ..."""

        model_config = SettingsConfigDict(
            env_prefix="ROUTEPLANE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        scan: ScanConfig = ScanConfig()
        watcher: WatcherConfig = WatcherConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # No .env or secrets files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return RoutePlaneSettings


RoutePlaneSettings = _make_settings_class({})


def load_config(repo_root: Path | None = None, **kwargs: Any) -> RoutePlaneConfig:
    """Build the effective config for the workspace at ``repo_root``.

    ``repo_root`` defaults to the current directory. ``kwargs`` are
    section-level overrides such as ``scan={"exclude_patterns": []}``.
    Unreadable YAML and values failing validation raise ``ConfigError``.
    """
    settings_cls = _make_settings_class(_workspace_yaml(repo_root or Path.cwd()))
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e
    return RoutePlaneConfig.model_validate(settings.model_dump())
