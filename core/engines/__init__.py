"""
Imaging back ends.

Each driver maps to an engine class that is imported only once its
libraries are known to be installed:
- opencv: OpenCV (cv2) on NumPy arrays
- pillow: Pillow
- software: NumPy rasterizer (Pillow only for file codecs)
"""

import importlib
import importlib.util
import logging
from typing import Type

from core.constants import EngineConstants
from core.engines.base import EngineImage, ImageEngine, Layer, Layers
from core.enums import EngineDriver

logger = logging.getLogger(__name__)

ENGINE_CLASSES = {
    EngineDriver.OPENCV.value: "core.engines.opencv_engine.OpenCVEngine",
    EngineDriver.PILLOW.value: "core.engines.pillow_engine.PillowEngine",
    EngineDriver.SOFTWARE.value: "core.engines.software_engine.SoftwareEngine",
}


def is_known_driver(driver: str) -> bool:
    return driver in ENGINE_CLASSES


def driver_available(driver: str) -> bool:
    """
    Check the libraries a driver needs can be imported on this host.

    Only looks the modules up; nothing is imported.
    """
    for module_name in EngineConstants.DRIVER_MODULES.get(driver, ()):
        try:
            if importlib.util.find_spec(module_name) is None:
                return False
        except (ImportError, ValueError) as e:
            logger.debug(f"Probe of {module_name} for driver {driver} failed: {e}")
            return False
    return True


def load_engine_class(driver: str) -> Type[ImageEngine]:
    """Import and return the engine class for driver."""
    module_name, class_name = ENGINE_CLASSES[driver].rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


__all__ = [
    "ENGINE_CLASSES",
    "EngineImage",
    "ImageEngine",
    "Layer",
    "Layers",
    "driver_available",
    "is_known_driver",
    "load_engine_class",
]
