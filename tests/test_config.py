"""
Tests for engine settings and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from prometheus_reasoning.config import EngineSettings, configure_logging, get_settings


class TestEngineSettings:
    """Test suite for EngineSettings."""

    def test_defaults(self, monkeypatch):
        for name in ("THINK_CYCLE_CAP", "REST_CYCLES", "NODE_MAX_AGE", "SEARCH_PLY"):
            monkeypatch.delenv(f"PROMETHEUS_{name}", raising=False)

        settings = EngineSettings(_env_file=None)

        assert settings.think_cycle_cap == 10_000
        assert settings.rest_cycles == 1
        assert settings.node_max_age == 60.0
        assert settings.search_ply == 10

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PROMETHEUS_THINK_CYCLE_CAP", "50")
        monkeypatch.setenv("PROMETHEUS_RECORD_DELIMITER", "|")

        settings = EngineSettings(_env_file=None)

        assert settings.think_cycle_cap == 50
        assert settings.record_delimiter == "|"

    @pytest.mark.parametrize("field", ["think_cycle_cap", "rest_cycles", "search_ply"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, **{field: 0})

    def test_log_level_normalized(self):
        assert EngineSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Test suite for configure_logging()."""

    def test_sets_package_level(self):
        package_logger = configure_logging("warning")
        try:
            assert package_logger.name == "prometheus_reasoning"
            assert package_logger.level == logging.WARNING
            assert len(package_logger.handlers) == 1
        finally:
            package_logger.setLevel(logging.NOTSET)

    def test_handler_added_once(self):
        configure_logging("info")
        package_logger = configure_logging("info")
        try:
            assert len(package_logger.handlers) == 1
        finally:
            package_logger.setLevel(logging.NOTSET)
