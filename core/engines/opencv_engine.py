"""
OpenCV back end.

Frames are NumPy arrays in OpenCV channel order (BGR or BGRA).
"""

import logging
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from core.constants import ImageConstants
from core.engines.base import EngineImage, ImageEngine
from core.enums import EngineDriver, ResampleFilter
from core.exceptions import ImageError
from core.image.converters import ImageConverters
from schemas import Color, Point, Size

logger = logging.getLogger(__name__)

INTERPOLATIONS = {
    ResampleFilter.UNDEFINED: cv2.INTER_AREA,
    ResampleFilter.POINT: cv2.INTER_NEAREST,
    ResampleFilter.BOX: cv2.INTER_AREA,
    ResampleFilter.TRIANGLE: cv2.INTER_LINEAR,
    ResampleFilter.HAMMING: cv2.INTER_LINEAR,
    ResampleFilter.CUBIC: cv2.INTER_CUBIC,
    ResampleFilter.LANCZOS: cv2.INTER_LANCZOS4,
}

JPEG_SUFFIXES = (".jpg", ".jpeg")

# Pillow-style save options and the imwrite flag each maps to, per suffix
WRITE_FLAGS = {
    "quality": {
        ".jpg": cv2.IMWRITE_JPEG_QUALITY,
        ".jpeg": cv2.IMWRITE_JPEG_QUALITY,
        ".webp": cv2.IMWRITE_WEBP_QUALITY,
    },
    "optimize": {".jpg": cv2.IMWRITE_JPEG_OPTIMIZE, ".jpeg": cv2.IMWRITE_JPEG_OPTIMIZE},
    "progressive": {".jpg": cv2.IMWRITE_JPEG_PROGRESSIVE, ".jpeg": cv2.IMWRITE_JPEG_PROGRESSIVE},
    "compress_level": {".png": cv2.IMWRITE_PNG_COMPRESSION},
}


def _write_params(suffix: str, options: dict) -> List[int]:
    """Translate named save options into the flat imwrite parameter list."""
    params = []
    for name, value in options.items():
        flag = WRITE_FLAGS.get(name, {}).get(suffix)
        if flag is None:
            logger.debug(f"Save option {name} has no OpenCV equivalent for {suffix}, ignored")
            continue
        params.extend([flag, int(value)])
    return params


def _to_uint8(frame: np.ndarray) -> np.ndarray:
    """Normalize decoded frame depth and channels to 8-bit BGR(A)."""
    if frame.dtype == np.uint16:
        frame = (frame >> 8).astype(np.uint8)
    elif frame.dtype != np.uint8:
        frame = np.clip(frame, 0, 255).astype(np.uint8)
    return ImageConverters.ensure_color(frame)


class OpenCVImage(EngineImage):
    """Image backed by one NumPy array per frame."""

    def _frame_size(self, frame: np.ndarray) -> Size:
        height, width = frame.shape[:2]
        return Size.of(width, height)

    def _copy_frame(self, frame: np.ndarray) -> np.ndarray:
        return frame.copy()

    def _crop_frame(self, frame: np.ndarray, point: Point, size: Size) -> np.ndarray:
        return frame[point.y : point.y + size.height, point.x : point.x + size.width].copy()

    def _resize_frame(self, frame: np.ndarray, size: Size, filter: ResampleFilter) -> np.ndarray:
        return cv2.resize(frame, size.as_tuple(), interpolation=INTERPOLATIONS[filter])

    def _paste_frame(self, base: np.ndarray, overlay: np.ndarray, point: Point) -> np.ndarray:
        return ImageConverters.blend_over(base, overlay, point)

    def _coalesce_frame(self, frame: np.ndarray) -> np.ndarray:
        return ImageConverters.ensure_four_channels(frame)

    def save(self, path: str, **options) -> "OpenCVImage":
        suffix = Path(path).suffix.lower()
        params = _write_params(suffix, options)
        frames = self.frames
        if suffix in JPEG_SUFFIXES:
            frames = [
                cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR) if frame.shape[2] == 4 else frame
                for frame in frames
            ]

        try:
            if len(frames) > 1:
                ok = cv2.imwritemulti(path, frames, params)
            else:
                ok = cv2.imwrite(path, frames[0], params)
        except cv2.error as e:
            logger.error(f"Failed to save image to {path}: {e}")
            raise ImageError(f"Unable to save image to {path}: {e}", path=path) from e

        if not ok:
            raise ImageError(f"Unable to save image to {path}", path=path)

        logger.debug(f"Saved {len(frames)} frame(s) to {path}")
        return self


class OpenCVEngine(ImageEngine):
    """Imaging engine backed by OpenCV."""

    name = EngineDriver.OPENCV.value

    def open(self, path: str) -> OpenCVImage:
        if not Path(path).is_file():
            logger.error(f"Image file not found: {path}")
            raise ImageError(f"File {path} does not exist", path=path)

        try:
            frames = self._read_frames(path)
        except cv2.error as e:
            logger.error(f"Failed to open image {path}: {e}")
            raise ImageError(f"Unable to open image {path}: {e}", path=path) from e

        if not frames:
            logger.error(f"OpenCV could not decode {path}")
            raise ImageError(f"Unable to open image {path}", path=path)

        return OpenCVImage([_to_uint8(frame) for frame in frames])

    def create(self, size: Size, color: Optional[Color] = None) -> OpenCVImage:
        color = color or Color.of("fff")
        canvas = np.full(
            (size.height, size.width, 4), ImageConverters.color_to_bgra(color), dtype=np.uint8
        )
        return OpenCVImage([canvas])

    @staticmethod
    def _read_frames(path: str) -> List[np.ndarray]:
        if Path(path).suffix.lower() in ImageConstants.MULTI_FRAME_EXTENSIONS:
            ok, frames = cv2.imreadmulti(path, flags=cv2.IMREAD_UNCHANGED)
            return list(frames) if ok else []

        frame = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        return [frame] if frame is not None else []
