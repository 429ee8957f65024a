"""
Centralized enums for the image operations facade.
"""

from enum import Enum


class EngineDriver(str, Enum):
    """Imaging back ends that can be selected at runtime"""

    OPENCV = "opencv"
    PILLOW = "pillow"
    SOFTWARE = "software"


class ThumbnailMode(str, Enum):
    """How a thumbnail fits its target box"""

    # Shrink to fit inside the box, keeping aspect ratio
    INSET = "inset"
    # Cover the box, keeping aspect ratio, then crop the overflow
    OUTBOUND = "outbound"


class ResampleFilter(str, Enum):
    """Resampling filter used when resizing"""

    UNDEFINED = "undefined"
    POINT = "point"
    BOX = "box"
    TRIANGLE = "triangle"
    HAMMING = "hamming"
    CUBIC = "cubic"
    LANCZOS = "lanczos"
