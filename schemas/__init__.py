"""
Schemas Package

This package contains the Pydantic models shared across all layers:
- Common value types (Size, Point, Color)
- Watermark configuration
"""

from .common import Color, Point, Size
from .watermark import WatermarkConfig

__all__ = [
    "Color",
    "Point",
    "Size",
    "WatermarkConfig",
]
