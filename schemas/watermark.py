"""
Watermark placement models.

This module contains the optional-field configuration accepted by
add_watermark_with_safe_config.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import InvalidArgument

from .common import Point, Size


class WatermarkConfig(BaseModel):
    """
    Watermark file and placement.

    Every field is optional: a missing point means the top-left corner, a
    missing size means the watermark keeps its natural size.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: Optional[str] = Field(None, alias="fileName", description="Watermark image path")
    point: Optional[Point] = Field(None, description="Top-left placement on the source")
    size: Optional[Size] = Field(None, description="Box the watermark is shrunk into")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "WatermarkConfig":
        """
        Create a config from a loosely shaped mapping.

        Recognized keys are fileName, point.x/point.y and size.width/size.height.
        A point or size is only taken when both of its keys are present.

        Raises:
            InvalidArgument: If the mapping or any present value is malformed
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise InvalidArgument(f"Watermark config must be a mapping, got {type(data).__name__}")

        file_name = data.get("fileName")
        if file_name is not None and not isinstance(file_name, str):
            raise InvalidArgument(f"Watermark fileName must be a string, got {file_name!r}")

        point = None
        raw_point = _section(data, "point")
        if raw_point.get("x") is not None and raw_point.get("y") is not None:
            point = Point.of(_as_int(raw_point["x"], "point.x"), _as_int(raw_point["y"], "point.y"))

        size = None
        raw_size = _section(data, "size")
        if raw_size.get("width") is not None and raw_size.get("height") is not None:
            size = Size.of(
                _as_int(raw_size["width"], "size.width"), _as_int(raw_size["height"], "size.height")
            )

        return cls(file_name=file_name, point=point, size=size)


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidArgument(f"Watermark {key} must be a mapping, got {value!r}")
    return value


def _as_int(value: Any, name: str) -> int:
    # bool is an int subclass but never a valid coordinate
    if isinstance(value, bool):
        raise InvalidArgument(f"Watermark {name} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidArgument(f"Watermark {name} must be a whole number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"Watermark {name} must be an integer, got {value!r}")
