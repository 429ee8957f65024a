"""
Settings for the image operations facade.

Values come from defaults, then from IMAGING_* environment variables
(nested fields use a double underscore, e.g. IMAGING_ENGINE__DRIVERS).
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import EngineConstants, ImageConstants, SystemConstants
from core.utils.enum_converter import ensure_list


class EngineSettings(BaseModel):
    """Imaging back end selection"""

    drivers: List[str] = Field(
        default_factory=lambda: list(EngineConstants.DEFAULT_DRIVER_ORDER),
        description="Drivers in order of preference; the first available one is used",
    )

    @field_validator("drivers", mode="before")
    @classmethod
    def split_drivers(cls, v: Any) -> List[str]:
        return ensure_list(v)


class ImageSettings(BaseModel):
    """Image operation defaults"""

    canvas_color: str = Field(
        ImageConstants.CANVAS_COLOR, description="Fill color of canvas thumbnails"
    )


class SystemSettings(BaseModel):
    """Process-level settings"""

    log_level: str = Field(SystemConstants.LOG_LEVEL_DEFAULT, description="Root log level")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level '{v}'")
        return v


class ImagingSettings(BaseSettings):
    """All settings, grouped by concern"""

    model_config = SettingsConfigDict(
        env_prefix=SystemConstants.ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: str = "development"
    engine: EngineSettings = Field(default_factory=EngineSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    system: SystemSettings = Field(default_factory=SystemSettings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@lru_cache
def get_settings() -> ImagingSettings:
    """Settings loaded once per process."""
    return ImagingSettings()


def configure_logging(settings: Optional[ImagingSettings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.system.log_level),
        format=SystemConstants.LOG_FORMAT,
    )
