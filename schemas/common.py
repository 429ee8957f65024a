"""
Common geometry and color models.

This module contains the value types shared by every layer:
- Size and Point for dimensions and placement
- Color for canvas and frame fills
"""

import re
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import InvalidArgument

_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{6}$")


class Size(BaseModel):
    """Image size (both sides strictly positive)"""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @classmethod
    def of(cls, width: int, height: int) -> "Size":
        """Build a Size, raising InvalidArgument for non-positive sides."""
        try:
            return cls(width=width, height=height)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid size {width}x{height}: {e.errors()[0]['msg']}") from e

    def contains(self, other: "Size", point: Optional["Point"] = None) -> bool:
        """Check if other, placed at point, lies inside this size."""
        x = point.x if point else 0
        y = point.y if point else 0
        return other.width + x <= self.width and other.height + y <= self.height

    def as_tuple(self) -> Tuple[int, int]:
        return (self.width, self.height)


class Point(BaseModel):
    """2D Point, origin at top-left"""

    model_config = ConfigDict(frozen=True)

    x: int = Field(0, ge=0, description="X coordinate")
    y: int = Field(0, ge=0, description="Y coordinate")

    @classmethod
    def of(cls, x: int = 0, y: int = 0) -> "Point":
        """Build a Point, raising InvalidArgument for negative coordinates."""
        try:
            return cls(x=x, y=y)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid point ({x}, {y}): {e.errors()[0]['msg']}") from e

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


class Color(BaseModel):
    """
    RGB color with an alpha value.

    The value is a hex string ("fff", "#ffffff", "FF0000"). Alpha runs from
    0 (transparent) to 100 (opaque).
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Hex color, 3 or 6 digits")
    alpha: int = Field(100, ge=0, le=100, description="Opacity in percent")

    @field_validator("value")
    @classmethod
    def normalize_hex(cls, v: str) -> str:
        v = v.strip().lstrip("#")
        if len(v) == 3:
            v = "".join(ch * 2 for ch in v)
        if not _HEX_COLOR.match(v):
            raise ValueError(f"'{v}' is not a hex color")
        return v.lower()

    @classmethod
    def of(cls, value: str, alpha: Optional[int] = None) -> "Color":
        """Build a Color; a missing alpha means fully opaque."""
        try:
            return cls(value=value, alpha=100 if alpha is None else alpha)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid color {value!r}: {e.errors()[0]['msg']}") from e

    def to_rgb(self) -> Tuple[int, int, int]:
        return tuple(int(self.value[i : i + 2], 16) for i in (0, 2, 4))

    def to_rgba(self) -> Tuple[int, int, int, int]:
        """Color as 0-255 channels, alpha scaled from percent."""
        r, g, b = self.to_rgb()
        return (r, g, b, round(self.alpha * 255 / 100))
