"""Tests for config/models.py module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from routeplane.config.models import LogOutputConfig, ScanConfig, WatcherConfig


class TestScanConfig:
    def test_blank_patterns_are_dropped(self) -> None:
        config = ScanConfig(file_patterns=["  **/*.ts ", "", "   "])
        assert config.file_patterns == ["**/*.ts"]


class TestWatcherConfig:
    @pytest.mark.parametrize("value", [0, -0.5])
    def test_debounce_must_be_positive(self, value: float) -> None:
        with pytest.raises(ValidationError):
            WatcherConfig(debounce_sec=value)


class TestLogOutputConfig:
    def test_stream_destinations(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/rpl.log")
