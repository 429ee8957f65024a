"""
Imaging engine capability interface.

Every back end provides two classes:
- ImageEngine: opens files and creates blank canvases
- EngineImage: an in-memory image made of one or more frames

EngineImage implements the shared operations (crop, paste, thumbnail,
layers) once, on top of a handful of per-frame primitives each back end
supplies.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Union

from core.enums import ResampleFilter, ThumbnailMode
from core.exceptions import InvalidArgument
from core.image.geometry import ImageGeometry
from core.utils.enum_converter import parse_enum
from schemas import Color, Point, Size

logger = logging.getLogger(__name__)


class EngineImage(ABC):
    """In-memory image owned by whoever received it from an operation."""

    def __init__(self, frames: List[Any], info: Optional[Dict[str, Any]] = None):
        if not frames:
            raise InvalidArgument("An image needs at least one frame")
        self.frames = frames
        self.info = dict(info or {})

    # Per-frame primitives implemented by each back end

    @abstractmethod
    def _frame_size(self, frame: Any) -> Size:
        """Size of a single frame."""

    @abstractmethod
    def _copy_frame(self, frame: Any) -> Any:
        """Independent copy of a frame."""

    @abstractmethod
    def _crop_frame(self, frame: Any, point: Point, size: Size) -> Any:
        """Rectangle of a frame (already validated to be in bounds)."""

    @abstractmethod
    def _resize_frame(self, frame: Any, size: Size, filter: ResampleFilter) -> Any:
        """Frame resampled to exactly size."""

    @abstractmethod
    def _paste_frame(self, base: Any, overlay: Any, point: Point) -> Any:
        """Overlay alpha-composited onto base at point."""

    @abstractmethod
    def _coalesce_frame(self, frame: Any) -> Any:
        """Frame flattened to a full-canvas image with alpha."""

    @abstractmethod
    def save(self, path: str, **options) -> "EngineImage":
        """
        Encode the image to path; the format follows the extension.

        Options use Pillow names (quality, optimize, compress_level, ...).
        Back ends drop the ones their encoder has no equivalent for.
        """

    # Shared operations

    @property
    def size(self) -> Size:
        """Size of the image (first frame)."""
        return self._frame_size(self.frames[0])

    def __len__(self) -> int:
        return len(self.frames)

    def copy(self) -> "EngineImage":
        return self.__class__([self._copy_frame(frame) for frame in self.frames], self.info)

    def crop(self, point: Point, size: Size) -> "EngineImage":
        """
        Crop every frame to size starting at point, in place.

        Raises:
            InvalidArgument: If the rectangle leaves the image
        """
        self._check_region(self.size, point, size)
        self.frames = [self._crop_frame(frame, point, size) for frame in self.frames]
        return self

    def paste(self, image: "EngineImage", point: Point) -> "EngineImage":
        """
        Paste the first frame of image onto every frame of this image, in place.

        Raises:
            InvalidArgument: If the pasted image would move outside this image
        """
        if not self.size.contains(image.size, point):
            raise InvalidArgument(
                f"Cannot paste image of size {image.size.width}x{image.size.height} at "
                f"({point.x}, {point.y}), it moves outside of the "
                f"{self.size.width}x{self.size.height} image"
            )
        overlay = image.frames[0]
        self.frames = [self._paste_frame(frame, overlay, point) for frame in self.frames]
        return self

    def thumbnail(
        self,
        size: Size,
        mode: Union[ThumbnailMode, str] = ThumbnailMode.INSET,
        filter: Union[ResampleFilter, str] = ResampleFilter.UNDEFINED,
    ) -> "EngineImage":
        """
        Create a resized copy that fits size.

        Args:
            size: Target box
            mode: INSET shrinks inside the box; OUTBOUND fills the box and crops
            filter: Resampling filter

        Returns:
            New image; this image is left untouched
        """
        mode = parse_enum(mode, ThumbnailMode, ThumbnailMode.INSET)
        filter = parse_enum(filter, ResampleFilter, ResampleFilter.UNDEFINED)
        thumbnail = self.copy()
        current = self.size

        if mode == ThumbnailMode.INSET:
            target = ImageGeometry.inset_size(current, size)
            if target != current:
                thumbnail.frames = [
                    self._resize_frame(frame, target, filter) for frame in thumbnail.frames
                ]
            return thumbnail

        resized, start, target = ImageGeometry.outbound_plan(current, size)
        if resized != current:
            thumbnail.frames = [
                self._resize_frame(frame, resized, filter) for frame in thumbnail.frames
            ]
        if target != resized:
            thumbnail.crop(start, target)
        return thumbnail

    def layers(self) -> "Layers":
        return Layers(self)

    @staticmethod
    def _check_region(container: Size, point: Point, size: Size) -> None:
        is_valid, error_msg = ImageGeometry.validate_region(container, point, size)
        if not is_valid:
            raise InvalidArgument(error_msg)


class Layer:
    """Single frame of an EngineImage."""

    def __init__(self, image: EngineImage, index: int):
        self._image = image
        self._index = index

    @property
    def frame(self) -> Any:
        """Raw back end frame (PIL Image or NumPy array)."""
        return self._image.frames[self._index]

    @property
    def size(self) -> Size:
        return self._image._frame_size(self.frame)

    def crop(self, point: Point, size: Size) -> "Layer":
        self._image._check_region(self.size, point, size)
        self._image.frames[self._index] = self._image._crop_frame(self.frame, point, size)
        return self


class Layers:
    """Frames of an EngineImage, manipulated one at a time."""

    def __init__(self, image: EngineImage):
        self._image = image

    def __len__(self) -> int:
        return len(self._image.frames)

    def __iter__(self) -> Iterator[Layer]:
        for index in range(len(self._image.frames)):
            yield Layer(self._image, index)

    def __getitem__(self, index: int) -> Layer:
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError(f"Layer index {index} out of range")
        return Layer(self._image, index)

    def coalesce(self) -> "Layers":
        """Flatten every frame to a full-canvas image with alpha."""
        self._image.frames = [self._image._coalesce_frame(frame) for frame in self._image.frames]
        logger.debug(f"Coalesced {len(self)} layers")
        return self


class ImageEngine(ABC):
    """Entry point of a back end: opens files and creates canvases."""

    name: str = ""

    @abstractmethod
    def open(self, path: str) -> EngineImage:
        """
        Decode the image at path.

        Raises:
            ImageError: If the file is missing or cannot be decoded
        """

    @abstractmethod
    def create(self, size: Size, color: Optional[Color] = None) -> EngineImage:
        """Blank single-frame canvas of size filled with color (opaque white by default)."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
