"""
Constants and configuration values for the image operations facade.
Centralizes driver names, default colors and resampling defaults.
"""

from core.enums import EngineDriver


# Engine Constants
class EngineConstants:
    """Constants related to imaging back end selection."""

    # First available driver in this order wins
    DEFAULT_DRIVER_ORDER = [
        EngineDriver.OPENCV.value,
        EngineDriver.PILLOW.value,
        EngineDriver.SOFTWARE.value,
    ]

    # Python modules each driver needs on the host
    DRIVER_MODULES = {
        EngineDriver.OPENCV.value: ("cv2", "numpy"),
        EngineDriver.PILLOW.value: ("PIL",),
        EngineDriver.SOFTWARE.value: ("numpy", "PIL"),
    }


# Image Constants
class ImageConstants:
    """Constants related to image handling."""

    # Extensions treated as layered (multi-frame) sources
    MULTI_FRAME_EXTENSIONS = (".gif",)

    # Canvas fill for canvas thumbnails
    CANVAS_COLOR = "FFF"

    # Frame defaults
    DEFAULT_FRAME_ALPHA = 100


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Environment variable prefix for settings
    ENV_PREFIX = "IMAGING_"
