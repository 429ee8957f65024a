"""
Image processing utilities - modular architecture.

This package provides focused image processing utilities:
- geometry: Size and placement arithmetic (aspect ratio, centering, fit checks)
- converters: NumPy channel and color conversions, alpha blending
- operations: Public image operations (crop, thumbnail, frame, watermark)
"""

from core.image.converters import ImageConverters
from core.image.geometry import ImageGeometry

__all__ = ["ImageConverters", "ImageGeometry"]
