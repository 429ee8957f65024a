"""
Software rasterizer back end.

All pixel work (resampling, cropping, compositing) is done with plain NumPy
on RGBA arrays. Pillow is only used to decode and encode files.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageSequence, UnidentifiedImageError

from core.engines.base import EngineImage, ImageEngine
from core.enums import EngineDriver, ResampleFilter
from core.exceptions import ImageError
from core.image.converters import ImageConverters
from schemas import Color, Point, Size

logger = logging.getLogger(__name__)

JPEG_SUFFIXES = (".jpg", ".jpeg")


def pil_to_numpy(image: Image.Image) -> np.ndarray:
    """Convert a PIL Image in any mode to an RGBA array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def numpy_to_pil(image: np.ndarray) -> Image.Image:
    """Convert an RGBA array to a PIL Image."""
    return Image.fromarray(np.ascontiguousarray(image))


def _sample_positions(source: int, target: int) -> np.ndarray:
    # Pixel centers of the target grid mapped back onto the source grid
    return (np.arange(target, dtype=np.float32) + 0.5) * source / target - 0.5


def resize_nearest(frame: np.ndarray, size: Size) -> np.ndarray:
    height, width = frame.shape[:2]
    rows = np.clip(np.rint(_sample_positions(height, size.height)), 0, height - 1).astype(int)
    cols = np.clip(np.rint(_sample_positions(width, size.width)), 0, width - 1).astype(int)
    return frame[rows[:, np.newaxis], cols]


def resize_bilinear(frame: np.ndarray, size: Size) -> np.ndarray:
    height, width = frame.shape[:2]
    ys = np.clip(_sample_positions(height, size.height), 0, height - 1)
    xs = np.clip(_sample_positions(width, size.width), 0, width - 1)

    y0 = np.floor(ys).astype(int)
    x0 = np.floor(xs).astype(int)
    y1 = np.minimum(y0 + 1, height - 1)
    x1 = np.minimum(x0 + 1, width - 1)
    wy = (ys - y0)[:, np.newaxis, np.newaxis]
    wx = (xs - x0)[np.newaxis, :, np.newaxis]

    pixels = frame.astype(np.float32)
    top = pixels[y0][:, x0] * (1 - wx) + pixels[y0][:, x1] * wx
    bottom = pixels[y1][:, x0] * (1 - wx) + pixels[y1][:, x1] * wx
    result = top * (1 - wy) + bottom * wy
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


class SoftwareImage(EngineImage):
    """Image backed by one RGBA NumPy array per frame."""

    def _frame_size(self, frame: np.ndarray) -> Size:
        height, width = frame.shape[:2]
        return Size.of(width, height)

    def _copy_frame(self, frame: np.ndarray) -> np.ndarray:
        return frame.copy()

    def _crop_frame(self, frame: np.ndarray, point: Point, size: Size) -> np.ndarray:
        return frame[point.y : point.y + size.height, point.x : point.x + size.width].copy()

    def _resize_frame(self, frame: np.ndarray, size: Size, filter: ResampleFilter) -> np.ndarray:
        if filter == ResampleFilter.POINT:
            return resize_nearest(frame, size)
        return resize_bilinear(frame, size)

    def _paste_frame(self, base: np.ndarray, overlay: np.ndarray, point: Point) -> np.ndarray:
        return ImageConverters.blend_over(base, overlay, point)

    def _coalesce_frame(self, frame: np.ndarray) -> np.ndarray:
        return ImageConverters.ensure_four_channels(frame)

    def save(self, path: str, **options) -> "SoftwareImage":
        frames = [numpy_to_pil(frame) for frame in self.frames]
        if Path(path).suffix.lower() in JPEG_SUFFIXES:
            frames = [frame.convert("RGB") for frame in frames]

        try:
            if len(frames) > 1:
                params = {key: self.info[key] for key in ("duration", "loop") if key in self.info}
                params.update(options)
                frames[0].save(path, save_all=True, append_images=frames[1:], **params)
            else:
                frames[0].save(path, **options)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save image to {path}: {e}")
            raise ImageError(f"Unable to save image to {path}: {e}", path=path) from e

        logger.debug(f"Saved {len(frames)} frame(s) to {path}")
        return self


class SoftwareEngine(ImageEngine):
    """Imaging engine that rasterizes with NumPy."""

    name = EngineDriver.SOFTWARE.value

    def open(self, path: str) -> SoftwareImage:
        try:
            with Image.open(path) as source:
                frames = [pil_to_numpy(frame) for frame in ImageSequence.Iterator(source)]
                info = dict(source.info)
        except FileNotFoundError as e:
            logger.error(f"Image file not found: {path}")
            raise ImageError(f"File {path} does not exist", path=path) from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.error(f"Failed to open image {path}: {e}")
            raise ImageError(f"Unable to open image {path}: {e}", path=path) from e

        return SoftwareImage(frames, info)

    def create(self, size: Size, color: Optional[Color] = None) -> SoftwareImage:
        color = color or Color.of("fff")
        canvas = np.empty((size.height, size.width, 4), dtype=np.uint8)
        canvas[:, :] = color.to_rgba()
        return SoftwareImage([canvas])
