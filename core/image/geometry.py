"""
Geometric calculations for image operations.

Handles the arithmetic shared by the operations and the back ends:
- Missing side resolution from an aspect ratio
- Centering and fit checks for pasted content
- Inset and outbound thumbnail sizing
"""

import math
from typing import Optional, Tuple

from core.exceptions import InvalidArgument
from schemas import Point, Size


class ImageGeometry:
    """Pure size and placement arithmetic (no pixel access)."""

    @staticmethod
    def resolve_missing_dimension(
        ratio: float, width: Optional[int] = None, height: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Compute the omitted side of a box from an aspect ratio.

        Args:
            ratio: Width divided by height of the source
            width: Target width, or None to derive it
            height: Target height, or None to derive it

        Returns:
            Tuple of (width, height); both unchanged when both are given

        Raises:
            InvalidArgument: If width and height are both None
        """
        if width is not None and height is None:
            height = math.ceil(width / ratio)
        elif width is None and height is not None:
            width = math.ceil(height * ratio)
        elif width is None and height is None:
            raise InvalidArgument("Width and height cannot be null at same time.")
        return width, height

    @staticmethod
    def centering_offset(container: Size, content: Size) -> Point:
        """
        Offset that centers content inside container.

        Each axis is handled independently; content as large as or larger than
        the container on an axis gets offset 0 there.
        """
        x = 0
        y = 0
        if content.width < container.width:
            x = math.ceil((container.width - content.width) / 2)
        if content.height < container.height:
            y = math.ceil((container.height - content.height) / 2)
        return Point.of(x, y)

    @staticmethod
    def fits_within_bounds(container: Size, content: Size, point: Point) -> bool:
        """
        Check content placed at point stays inside container.

        Args:
            container: Size of the destination image
            content: Size of the image being placed
            point: Top-left placement of content

        Returns:
            True if content fits without shrinking
        """
        if content.width > container.width or content.height > container.height:
            return False

        width_offset = content.width + point.x
        height_offset = content.height + point.y

        if width_offset > container.width or height_offset > container.height:
            return False

        return True

    @staticmethod
    def inset_size(image: Size, box: Size) -> Size:
        """
        Size of image shrunk to fit within box, keeping aspect ratio.

        Images already inside the box are never upscaled.
        """
        if image.width <= box.width and image.height <= box.height:
            return image

        ratio = min(box.width / image.width, box.height / image.height)
        return Size.of(
            max(1, round(image.width * ratio)),
            max(1, round(image.height * ratio)),
        )

    @staticmethod
    def outbound_plan(image: Size, box: Size) -> Tuple[Size, Point, Size]:
        """
        Resize and crop needed to fill box, keeping aspect ratio.

        The image is scaled so it covers the box (never upscaled), then the
        overflow is cropped evenly from both sides.

        Returns:
            Tuple of (resize size, crop start point, crop size)
        """
        target = Size.of(min(box.width, image.width), min(box.height, image.height))
        ratio = max(target.width / image.width, target.height / image.height)
        resized = Size.of(
            max(target.width, round(image.width * ratio)),
            max(target.height, round(image.height * ratio)),
        )
        start = Point.of(
            max(0, round((resized.width - target.width) / 2)),
            max(0, round((resized.height - target.height) / 2)),
        )
        return resized, start, target

    @staticmethod
    def validate_region(container: Size, point: Point, size: Size) -> Tuple[bool, Optional[str]]:
        """
        Validate a rectangle against container bounds.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if point.x >= container.width or point.y >= container.height:
            return False, (
                f"Start point ({point.x}, {point.y}) lies outside image "
                f"{container.width}x{container.height}"
            )

        if not container.contains(size, point):
            return False, (
                f"Region {size.width}x{size.height} at ({point.x}, {point.y}) exceeds image "
                f"bounds {container.width}x{container.height}"
            )

        return True, None
