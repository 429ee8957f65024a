"""
Tests for settings and logging configuration
"""

import logging

import pytest
from pydantic import ValidationError

import config
from config import ImagingSettings, configure_logging, get_settings


class TestImagingSettings:
    """Test settings defaults and overrides"""

    def test_defaults(self):
        settings = ImagingSettings()
        assert settings.engine.drivers == ["opencv", "pillow", "software"]
        assert settings.image.canvas_color == "FFF"
        assert settings.system.log_level == "INFO"

    def test_drivers_from_env(self, monkeypatch):
        monkeypatch.setenv("IMAGING_ENGINE__DRIVERS", '["pillow", "software"]')
        assert ImagingSettings().engine.drivers == ["pillow", "software"]

    def test_single_driver_string(self):
        settings = ImagingSettings(engine={"drivers": "software"})
        assert settings.engine.drivers == ["software"]

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("IMAGING_SYSTEM__LOG_LEVEL", "debug")
        assert ImagingSettings().system.log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ImagingSettings(system={"log_level": "chatty"})

    def test_to_dict(self):
        data = ImagingSettings().to_dict()
        assert data["engine"]["drivers"] == ["opencv", "pillow", "software"]

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Test logging setup"""

    def test_applies_level_and_format(self, monkeypatch):
        calls = []
        monkeypatch.setattr(config.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging(ImagingSettings(system={"log_level": "warning"}))

        assert calls == [
            {
                "level": logging.WARNING,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            }
        ]
