"""
Pillow back end.

Frames are PIL Images; animated sources keep every frame and their
duration/loop info so they can be written back as animations.
"""

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageSequence, UnidentifiedImageError

from core.engines.base import EngineImage, ImageEngine
from core.enums import EngineDriver, ResampleFilter
from core.exceptions import ImageError
from schemas import Color, Point, Size

logger = logging.getLogger(__name__)

RESAMPLE_FILTERS = {
    ResampleFilter.UNDEFINED: Image.Resampling.BICUBIC,
    ResampleFilter.POINT: Image.Resampling.NEAREST,
    ResampleFilter.BOX: Image.Resampling.BOX,
    ResampleFilter.TRIANGLE: Image.Resampling.BILINEAR,
    ResampleFilter.HAMMING: Image.Resampling.HAMMING,
    ResampleFilter.CUBIC: Image.Resampling.BICUBIC,
    ResampleFilter.LANCZOS: Image.Resampling.LANCZOS,
}

# Info keys carried over when writing animations
ANIMATION_INFO_KEYS = ("duration", "loop", "disposal")

JPEG_SUFFIXES = (".jpg", ".jpeg")


class PillowImage(EngineImage):
    """Image backed by one PIL Image per frame."""

    def _frame_size(self, frame: Image.Image) -> Size:
        return Size.of(*frame.size)

    def _copy_frame(self, frame: Image.Image) -> Image.Image:
        return frame.copy()

    def _crop_frame(self, frame: Image.Image, point: Point, size: Size) -> Image.Image:
        return frame.crop((point.x, point.y, point.x + size.width, point.y + size.height))

    def _resize_frame(self, frame: Image.Image, size: Size, filter: ResampleFilter) -> Image.Image:
        # Palette frames resample poorly
        if frame.mode == "P":
            frame = frame.convert("RGBA")
        return frame.resize(size.as_tuple(), resample=RESAMPLE_FILTERS[filter])

    def _paste_frame(self, base: Image.Image, overlay: Image.Image, point: Point) -> Image.Image:
        if base.mode not in ("RGB", "RGBA"):
            base = base.convert("RGBA")
        else:
            base = base.copy()

        if overlay.mode in ("RGBA", "LA", "P") or "transparency" in overlay.info:
            overlay = overlay.convert("RGBA")
        elif overlay.mode != "RGB":
            overlay = overlay.convert("RGB")

        if base.mode == "RGBA" and overlay.mode == "RGBA":
            base.alpha_composite(overlay, dest=point.as_tuple())
        else:
            base.paste(overlay, point.as_tuple(), overlay if overlay.mode == "RGBA" else None)
        return base

    def _coalesce_frame(self, frame: Image.Image) -> Image.Image:
        return frame.convert("RGBA")

    def save(self, path: str, **options) -> "PillowImage":
        frames = self.frames
        if Path(path).suffix.lower() in JPEG_SUFFIXES:
            frames = [frame.convert("RGB") if frame.mode != "RGB" else frame for frame in frames]

        try:
            if len(frames) > 1:
                params = {key: self.info[key] for key in ANIMATION_INFO_KEYS if key in self.info}
                params.update(options)
                frames[0].save(path, save_all=True, append_images=frames[1:], **params)
            else:
                frames[0].save(path, **options)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save image to {path}: {e}")
            raise ImageError(f"Unable to save image to {path}: {e}", path=path) from e

        logger.debug(f"Saved {len(frames)} frame(s) to {path}")
        return self


class PillowEngine(ImageEngine):
    """Imaging engine backed by Pillow."""

    name = EngineDriver.PILLOW.value

    def open(self, path: str) -> PillowImage:
        try:
            with Image.open(path) as source:
                frames = [frame.copy() for frame in ImageSequence.Iterator(source)]
                info = dict(source.info)
        except FileNotFoundError as e:
            logger.error(f"Image file not found: {path}")
            raise ImageError(f"File {path} does not exist", path=path) from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.error(f"Failed to open image {path}: {e}")
            raise ImageError(f"Unable to open image {path}: {e}", path=path) from e

        return PillowImage(frames, info)

    def create(self, size: Size, color: Optional[Color] = None) -> PillowImage:
        color = color or Color.of("fff")
        return PillowImage([Image.new("RGBA", size.as_tuple(), color.to_rgba())])
