"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and validation
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from routeplane.config import RoutePlaneConfig, load_config
from routeplane.config.loader import _deep_merge, _load_yaml
from routeplane.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the global config at a temp file so the host's config never leaks in."""
    global_path = tmp_path / "global" / "config.yaml"
    with patch("routeplane.config.loader.GLOBAL_CONFIG_PATH", global_path):
        yield global_path


def _write_repo_config(root: Path, content: str) -> None:
    config_dir = root / ".routeplane"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yaml").write_text(content)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("scan:\n  file_patterns: ['src/**/*.ts']\n")

        assert _load_yaml(yaml_file) == {"scan": {"file_patterns": ["src/**/*.ts"]}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("scan:\n  file_patterns:\n    - [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_override(self) -> None:
        base = {"scan": {"file_patterns": ["a"], "exclude_patterns": ["b"]}}
        override = {"scan": {"file_patterns": ["c"]}}

        assert _deep_merge(base, override) == {
            "scan": {"file_patterns": ["c"], "exclude_patterns": ["b"]}
        }

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"a": 2})
        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert isinstance(config, RoutePlaneConfig)
        assert config.scan.file_patterns == ["**/*.controller.ts"]
        assert config.scan.exclude_patterns == ["**/node_modules/**", "**/dist/**"]
        assert config.watcher.debounce_sec == 0.5
        assert config.logging.level == "INFO"

    def test_repo_yaml(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "scan:\n  file_patterns:\n    - 'src/**/*.ts'\n")

        config = load_config(tmp_path)

        assert config.scan.file_patterns == ["src/**/*.ts"]
        assert config.scan.exclude_patterns == ["**/node_modules/**", "**/dist/**"]

    def test_repo_overrides_global(self, tmp_path: Path, isolated_global_config: Path) -> None:
        isolated_global_config.parent.mkdir(parents=True)
        isolated_global_config.write_text("logging:\n  level: ERROR\nwatcher:\n  debounce_sec: 2\n")
        _write_repo_config(tmp_path, "logging:\n  level: DEBUG\n")

        config = load_config(tmp_path)

        assert config.logging.level == "DEBUG"
        assert config.watcher.debounce_sec == 2.0

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_repo_config(tmp_path, "logging:\n  level: DEBUG\n")
        monkeypatch.setenv("ROUTEPLANE__LOGGING__LEVEL", "WARNING")

        assert load_config(tmp_path).logging.level == "WARNING"

    def test_kwargs_override_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ROUTEPLANE__LOGGING__LEVEL", "WARNING")

        config = load_config(tmp_path, logging={"level": "ERROR"})

        assert config.logging.level == "ERROR"

    def test_empty_pattern_lists_are_valid(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "scan:\n  file_patterns: []\n  exclude_patterns: []\n")

        config = load_config(tmp_path)

        assert config.scan.file_patterns == []
        assert config.scan.exclude_patterns == []

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "watcher:\n  debounce_sec: -1\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "debounce_sec" in exc_info.value.message

    def test_invalid_yaml_raises_config_error(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "scan: [unclosed")

        with pytest.raises(ConfigError):
            load_config(tmp_path)
