"""
Image operations.

Handles the public image manipulation tasks:
- Cropping (every frame of layered sources)
- Aspect-preserving thumbnails
- Framing with a colored border
- Thumbnails centered on a fixed canvas
- Watermarking

Pixel work is delegated to the engine chosen by an EngineRegistry.
"""

import logging
import math
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from core.constants import ImageConstants
from core.engine_registry import EngineRegistry
from core.engines.base import EngineImage, ImageEngine
from core.enums import ResampleFilter, ThumbnailMode
from core.exceptions import InvalidArgument
from core.image.geometry import ImageGeometry
from core.utils.enum_converter import parse_enum
from schemas import Color, Point, Size, WatermarkConfig

logger = logging.getLogger(__name__)


def is_multi_frame(path: str) -> bool:
    """Check if path names a layered (animated) format."""
    return Path(path).suffix.lower() in ImageConstants.MULTI_FRAME_EXTENSIONS


class ImageOperations:
    """Image operations on top of the registry's engine."""

    def __init__(self, registry: Optional[EngineRegistry] = None, canvas_color: Optional[str] = None):
        """
        Initialize Image Operations

        Args:
            registry: Engine registry to use (a registry built from settings by default)
            canvas_color: Fill color of canvas thumbnails (defaults to settings)
        """
        if canvas_color is None:
            from config import get_settings

            canvas_color = get_settings().image.canvas_color

        self.registry = registry or EngineRegistry()
        self.canvas_color = canvas_color

    @property
    def engine(self) -> ImageEngine:
        return self.registry.get_engine()

    def crop(
        self, path: str, width: int, height: int, start_x: int = 0, start_y: int = 0
    ) -> EngineImage:
        """
        Crop an image.

        Layered sources (.gif) are coalesced and every layer is cropped to
        the same rectangle.

        Args:
            path: Image file path
            width: Crop width
            height: Crop height
            start_x: Left edge of the crop
            start_y: Top edge of the crop

        Returns:
            Cropped image

        Example:
            >>> ops.crop("photo.jpg", 200, 200, 5, 5)
        """
        point = Point.of(start_x, start_y)
        size = Size.of(width, height)
        image = self.engine.open(path).copy()

        if is_multi_frame(path):
            layers = image.layers().coalesce()
            for layer in layers:
                layer.crop(point, size)
            logger.debug(f"Cropped {len(layers)} layers of {path} to {width}x{height}")
            return image

        logger.debug(f"Cropped {path} to {width}x{height} at ({start_x}, {start_y})")
        return image.crop(point, size)

    def thumbnail(
        self,
        path: str,
        width: Optional[int],
        height: Optional[int],
        mode: Union[ThumbnailMode, str] = ThumbnailMode.OUTBOUND,
        filter: Union[ResampleFilter, str] = ResampleFilter.UNDEFINED,
    ) -> EngineImage:
        """
        Create a thumbnail keeping the aspect ratio of the image.

        One of width/height may be None; it is derived from the source ratio.

        Args:
            path: Image file path
            width: Thumbnail width, or None
            height: Thumbnail height, or None
            mode: OUTBOUND (fill and crop) or INSET (fit inside)
            filter: Resampling filter

        Returns:
            Thumbnail image

        Raises:
            InvalidArgument: If width and height are both None
        """
        mode = parse_enum(mode, ThumbnailMode, ThumbnailMode.OUTBOUND)
        filter = parse_enum(filter, ResampleFilter, ResampleFilter.UNDEFINED)

        image = self.engine.open(path)
        if is_multi_frame(path):
            image.layers().coalesce()

        size = image.size
        ratio = size.width / size.height
        width, height = ImageGeometry.resolve_missing_dimension(ratio, width, height)
        box = Size.of(width, height)

        logger.debug(f"Thumbnail of {path} into {width}x{height} ({mode.value})")
        return image.thumbnail(box, mode, filter)

    def frame(
        self,
        path: str,
        margin: Union[int, float],
        color: str,
        alpha: int = ImageConstants.DEFAULT_FRAME_ALPHA,
    ) -> EngineImage:
        """
        Add a frame around an image.

        The image size grows by 2 x margin on each axis.

        Args:
            path: Image file path
            margin: Frame width in pixels
            color: Frame color as hex
            alpha: Frame opacity (0-100)

        Returns:
            Framed image
        """
        if margin < 0:
            raise InvalidArgument(f"Frame margin must not be negative, got {margin}")

        image = self.engine.open(path)
        size = image.size
        pad = math.ceil(margin * 2)
        canvas = self.engine.create(
            Size.of(size.width + pad, size.height + pad), Color.of(color, alpha)
        )
        return canvas.paste(image, Point.of(math.ceil(margin), math.ceil(margin)))

    def canvas_thumbnail(
        self, path: str, width: int, height: int, alpha: Optional[int] = None
    ) -> EngineImage:
        """
        Create a thumbnail of exactly width x height.

        The image is shrunk to fit and centered on a canvas filled with the
        canvas color.

        Args:
            path: Image file path
            width: Canvas width
            height: Canvas height
            alpha: Canvas opacity (0-100), opaque when None

        Returns:
            Canvas image
        """
        box = Size.of(width, height)

        image = self.engine.open(path).thumbnail(box)
        canvas = self.engine.create(box, Color.of(self.canvas_color, alpha))

        offset = ImageGeometry.centering_offset(box, image.size)
        return canvas.paste(image, offset)

    def add_watermark(
        self,
        path: str,
        watermark_path: str,
        point: Optional[Point] = None,
        box: Optional[Size] = None,
    ) -> EngineImage:
        """
        Paste a watermark onto an image.

        Args:
            path: Image file path
            watermark_path: Watermark image file path
            point: Top-left placement of the watermark (top-left corner by default)
            box: Box the watermark is shrunk into first

        Returns:
            Watermarked image
        """
        image = self.engine.open(path)
        watermark = self.engine.open(watermark_path)

        if point is None:
            point = Point.of(0, 0)

        if box is not None:
            watermark = watermark.thumbnail(box, ThumbnailMode.INSET)

        # Watermarks that do not fit are shrunk to the full image
        size = image.size
        if not ImageGeometry.fits_within_bounds(size, watermark.size, point):
            logger.debug(
                f"Watermark {watermark.size.width}x{watermark.size.height} at "
                f"({point.x}, {point.y}) does not fit {size.width}x{size.height}, shrinking"
            )
            watermark = watermark.thumbnail(size, ThumbnailMode.INSET)

        return image.paste(watermark, point)

    def add_watermark_with_safe_config(
        self, path: str, config: Optional[Union[WatermarkConfig, Mapping[str, Any]]] = None
    ) -> EngineImage:
        """
        Watermark an image from a loosely shaped config.

        Args:
            path: Image file path
            config: WatermarkConfig or a mapping with fileName, point and size

        Returns:
            Watermarked image, or the plain image when no fileName is given

        Raises:
            InvalidArgument: If config values are malformed
        """
        if not isinstance(config, WatermarkConfig):
            config = WatermarkConfig.from_dict(config)

        if config.file_name is None:
            logger.warning(f"No watermark file configured for {path}, returning image unchanged")
            return self.engine.open(path)

        return self.add_watermark(path, config.file_name, config.point, config.size)
