"""
Pytest configuration and fixtures for image operations tests
"""

import pytest
from PIL import Image

from core.engine_registry import EngineRegistry
from core.image.operations import ImageOperations

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)

DRIVERS = ["pillow", "software", "opencv"]


def rgba_at(image, x, y, frame=0):
    """Pixel of an EngineImage as an RGBA tuple, whatever the back end."""
    data = image.frames[frame]
    if isinstance(data, Image.Image):
        return tuple(data.convert("RGBA").getpixel((x, y)))

    pixel = [int(value) for value in data[y, x]]
    if len(pixel) == 3:
        pixel.append(255)
    if image.__class__.__name__ == "OpenCVImage":
        blue, green, red, alpha = pixel
        return (red, green, blue, alpha)
    return tuple(pixel)


def make_image(path, size, color, mode="RGB"):
    """Write a solid color image and return its path as a string"""
    fill = color if mode == "RGB" else color + (255,)
    Image.new(mode, size, fill).save(path)
    return str(path)


@pytest.fixture
def square_image(tmp_path):
    """100x100 red PNG"""
    return make_image(tmp_path / "square.png", (100, 100), RED)


@pytest.fixture
def wide_image(tmp_path):
    """300x100 red PNG"""
    return make_image(tmp_path / "wide.png", (300, 100), RED)


@pytest.fixture
def small_image(tmp_path):
    """20x10 blue PNG"""
    return make_image(tmp_path / "small.png", (20, 10), BLUE)


@pytest.fixture
def large_watermark(tmp_path):
    """300x200 opaque green RGBA PNG"""
    return make_image(tmp_path / "watermark_large.png", (300, 200), GREEN, mode="RGBA")


@pytest.fixture
def small_watermark(tmp_path):
    """50x50 opaque green RGBA PNG"""
    return make_image(tmp_path / "watermark_small.png", (50, 50), GREEN, mode="RGBA")


@pytest.fixture
def animated_gif(tmp_path):
    """60x40 GIF with three differently colored frames"""
    path = tmp_path / "animated.gif"
    frames = [Image.new("RGB", (60, 40), color) for color in (RED, GREEN, BLUE)]
    frames[0].save(path, save_all=True, append_images=frames[1:], duration=100, loop=0)
    return str(path)


@pytest.fixture(params=DRIVERS)
def driver(request):
    """Each back end installed on this host"""
    if request.param == "opencv":
        pytest.importorskip("cv2")
    return request.param


@pytest.fixture
def registry(driver):
    """Registry pinned to a single driver"""
    return EngineRegistry(drivers=[driver])


@pytest.fixture
def engine(registry):
    return registry.get_engine()


@pytest.fixture
def ops(registry):
    """ImageOperations bound to a single driver"""
    return ImageOperations(registry=registry, canvas_color="FFF")


@pytest.fixture(params=DRIVERS)
def layered_ops(request):
    """ImageOperations for multi-frame sources, one per back end"""
    if request.param == "opencv":
        pytest.importorskip("cv2")
    return ImageOperations(registry=EngineRegistry(drivers=[request.param]), canvas_color="FFF")
