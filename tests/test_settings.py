"""Tests for settings and logging configuration."""

import pytest
import structlog
from pydantic import ValidationError

from py_planetgen.config import Settings, settings
from py_planetgen.utils import configure_logging


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self):
        assert settings.world_min_y == -64
        assert settings.world_max_y == 319
        assert settings.default_sea_level == 62
        assert settings.min_biome_weight == 0.5
        assert settings.biome_noise_scale == 0.0008

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PLANETGEN_WORLD_MIN_Y", "-128")
        monkeypatch.setenv("PLANETGEN_LOG_FORMAT", "plain")
        overridden = Settings()
        assert overridden.world_min_y == -128
        assert overridden.log_format == "plain"

    def test_invalid_scale_rejected(self, monkeypatch):
        monkeypatch.setenv("PLANETGEN_BIOME_NOISE_SCALE", "0")
        with pytest.raises(ValidationError):
            Settings()


class TestConfigureLogging:
    """structlog bootstrap."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    @pytest.mark.parametrize("log_format", ["json", "plain"])
    def test_configure(self, log_format):
        configure_logging("debug", log_format)
        assert structlog.is_configured()
        structlog.get_logger("py_planetgen.test").info("configured", log_format=log_format)
