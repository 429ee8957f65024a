"""
Tests for the imaging back ends through the capability interface
"""

import pytest

from core.enums import ResampleFilter, ThumbnailMode
from core.exceptions import ImageError, InvalidArgument
from schemas import Color, Point, Size
from tests.conftest import BLUE, DRIVERS, GREEN, RED, make_image, rgba_at


class TestEngineImage:
    """Test engine images and canvases"""

    def test_create_fills_color(self, engine):
        canvas = engine.create(Size.of(8, 4), Color.of("00ff00", 50))

        assert canvas.size == Size.of(8, 4)
        assert len(canvas) == 1
        assert rgba_at(canvas, 7, 3) == GREEN + (128,)

    def test_create_defaults_to_opaque_white(self, engine):
        canvas = engine.create(Size.of(2, 2))
        assert rgba_at(canvas, 0, 0) == (255, 255, 255, 255)

    def test_copy_is_independent(self, engine, square_image):
        image = engine.open(square_image)
        duplicate = image.copy()

        duplicate.crop(Point.of(0, 0), Size.of(10, 10))

        assert image.size == Size.of(100, 100)
        assert duplicate.size == Size.of(10, 10)

    def test_thumbnail_leaves_source_untouched(self, engine, wide_image):
        image = engine.open(wide_image)

        thumbnail = image.thumbnail(Size.of(30, 30), ThumbnailMode.OUTBOUND, ResampleFilter.POINT)

        assert thumbnail.size == Size.of(30, 30)
        assert image.size == Size.of(300, 100)

    @pytest.mark.parametrize("filter", list(ResampleFilter))
    def test_thumbnail_every_filter(self, engine, square_image, filter):
        thumbnail = engine.open(square_image).thumbnail(Size.of(25, 50), filter=filter)
        assert thumbnail.size == Size.of(25, 25)
        assert rgba_at(thumbnail, 12, 12) == RED + (255,)

    def test_paste_blends_alpha(self, engine):
        base = engine.create(Size.of(4, 4), Color.of("0000ff"))
        overlay = engine.create(Size.of(2, 2), Color.of("ff0000", 0))

        base.paste(overlay, Point.of(1, 1))

        assert rgba_at(base, 1, 1) == BLUE + (255,)

    def test_paste_half_transparent(self, engine):
        base = engine.create(Size.of(4, 4), Color.of("000000"))
        overlay = engine.create(Size.of(2, 2), Color.of("ffffff", 50))

        base.paste(overlay, Point.of(2, 2))

        red, green, blue, alpha = rgba_at(base, 3, 3)
        assert alpha == 255
        assert 126 <= red <= 130
        assert rgba_at(base, 0, 0) == (0, 0, 0, 255)

    def test_paste_outside_fails(self, engine):
        base = engine.create(Size.of(4, 4))
        overlay = engine.create(Size.of(3, 3))

        with pytest.raises(InvalidArgument):
            base.paste(overlay, Point.of(2, 0))

    def test_layers(self, engine, square_image):
        layers = engine.open(square_image).layers()

        assert len(layers) == 1
        assert layers[0].size == Size.of(100, 100)
        assert layers[-1].size == Size.of(100, 100)
        with pytest.raises(IndexError):
            layers[1]

    def test_coalesce_adds_alpha(self, engine, square_image):
        image = engine.open(square_image)
        image.layers().coalesce()
        assert rgba_at(image, 0, 0) == RED + (255,)

    def test_save_and_reopen(self, engine, tmp_path, square_image):
        target = str(tmp_path / "out.png")

        engine.open(square_image).crop(Point.of(0, 0), Size.of(30, 20)).save(target)

        reopened = engine.open(target)
        assert reopened.size == Size.of(30, 20)
        assert rgba_at(reopened, 29, 19) == RED + (255,)

    def test_save_jpeg_drops_alpha(self, engine, tmp_path):
        target = str(tmp_path / "out.jpg")

        engine.create(Size.of(16, 16), Color.of("00f", 50)).save(target)

        assert engine.open(target).size == Size.of(16, 16)

    def test_save_named_options(self, engine, tmp_path):
        canvas = engine.create(Size.of(64, 64), Color.of("3a7"))
        stored = tmp_path / "stored.png"
        packed = tmp_path / "packed.png"

        canvas.save(str(stored), compress_level=0)
        canvas.save(str(packed), compress_level=9, optimize=True)

        assert packed.stat().st_size < stored.stat().st_size
        assert engine.open(str(packed)).size == Size.of(64, 64)

    def test_save_jpeg_quality(self, engine, tmp_path):
        target = str(tmp_path / "out.jpg")

        engine.create(Size.of(16, 16), Color.of("f00")).save(target, quality=90)

        assert engine.open(target).size == Size.of(16, 16)

    def test_save_unknown_format(self, engine, tmp_path):
        canvas = engine.create(Size.of(2, 2))
        with pytest.raises(ImageError):
            canvas.save(str(tmp_path / "out.unknown-format"))


class TestLayeredImages:
    """Test multi-frame handling"""

    @pytest.fixture(params=DRIVERS)
    def layered_engine(self, request):
        if request.param == "opencv":
            pytest.importorskip("cv2")
        from core.engine_registry import EngineRegistry

        return EngineRegistry(drivers=[request.param]).get_engine()

    def test_open_reads_every_frame(self, layered_engine, animated_gif):
        image = layered_engine.open(animated_gif)
        assert len(image) == 3
        assert len(image.layers()) == 3

    def test_layer_crop_only_touches_its_frame(self, layered_engine, animated_gif):
        image = layered_engine.open(animated_gif)
        image.layers().coalesce()

        image.layers()[1].crop(Point.of(0, 0), Size.of(10, 10))

        assert image.layers()[0].size == Size.of(60, 40)
        assert image.layers()[1].size == Size.of(10, 10)

    def test_layer_crop_out_of_bounds(self, layered_engine, animated_gif):
        image = layered_engine.open(animated_gif)
        with pytest.raises(InvalidArgument):
            image.layers()[0].crop(Point.of(55, 0), Size.of(10, 10))

    def test_save_animation(self, layered_engine, animated_gif, tmp_path):
        target = str(tmp_path / "cropped.gif")

        image = layered_engine.open(animated_gif)
        image.layers().coalesce()
        image.crop(Point.of(0, 0), Size.of(20, 20)).save(target)

        reopened = layered_engine.open(target)
        assert len(reopened) == 3
        assert reopened.size == Size.of(20, 20)

    def test_single_frame_gif(self, layered_engine, tmp_path):
        path = make_image(tmp_path / "still.gif", (12, 12), RED)
        assert len(layered_engine.open(path)) == 1


class TestOpenCVWriteParams:
    """Test translation of named save options for OpenCV"""

    @pytest.fixture(autouse=True)
    def opencv(self):
        return pytest.importorskip("cv2")

    def test_jpeg_quality(self, opencv):
        from core.engines.opencv_engine import _write_params

        assert _write_params(".jpg", {"quality": 80}) == [opencv.IMWRITE_JPEG_QUALITY, 80]

    def test_png_compression(self, opencv):
        from core.engines.opencv_engine import _write_params

        assert _write_params(".png", {"compress_level": 6}) == [opencv.IMWRITE_PNG_COMPRESSION, 6]

    def test_option_without_equivalent_ignored(self):
        from core.engines.opencv_engine import _write_params

        assert _write_params(".png", {"quality": 80, "duration": 100}) == []
