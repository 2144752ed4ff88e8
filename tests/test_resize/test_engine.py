"""Tests for the nearest-neighbour resize engine."""

import numpy as np
import pytest
from PIL import Image

from imgresize.errors.exceptions import DecodeError, EmptyImageError
from imgresize.resize.engine import infer_dimensions, resize_image, resize_to
from imgresize.types import Dimension


def _gradient(width: int, height: int) -> Image.Image:
    """RGBA image whose pixel (x, y) is (x, y, x ^ y, 255 - x) mod 256."""
    xs, ys = np.meshgrid(np.arange(width), np.arange(height))
    arr = np.stack([xs % 256, ys % 256, (xs ^ ys) % 256, (255 - xs) % 256], axis=-1)
    return Image.fromarray(arr.astype(np.uint8))


class TestIdentity:
    def test_zero_zero_returns_source(self):
        src = _gradient(20, 10)
        result = resize_image(src, 0, 0)
        assert result is src
        assert result.tobytes() == src.tobytes()


class TestAspectRatioInference:
    def test_width_only(self):
        src = Image.new("RGB", (100, 200), (0, 0, 255))
        assert resize_image(src, 50, 0).size == (50, 100)

    def test_height_only(self):
        src = Image.new("RGB", (100, 200), (0, 0, 255))
        assert resize_image(src, 0, 100).size == (50, 100)

    def test_floor_division(self):
        src = Image.new("RGB", (3, 7), (0, 0, 0))
        # 7 * 2 // 3 == 4
        assert resize_image(src, 2, 0).size == (2, 4)
        # 3 * 5 // 7 == 2
        assert resize_image(src, 0, 5).size == (2, 5)

    def test_inferred_zero_is_raised_to_one(self):
        assert infer_dimensions(1, 100, 0, 50) == (1, 50)

    def test_infer_both_zero_is_no_resize(self):
        assert infer_dimensions(10, 10, 0, 0) == (0, 0)

    def test_explicit_both_ignores_aspect(self):
        src = Image.new("RGB", (100, 200))
        assert resize_image(src, 30, 30).size == (30, 30)


class TestPixelMapping:
    def test_uniform_color_preserved(self):
        src = Image.new("RGBA", (100, 100), (255, 0, 0, 255))
        resized = resize_image(src, 50, 50)
        assert resized.size == (50, 50)
        assert resized.getcolors() == [(2500, (255, 0, 0, 255))]

    def test_samples_floor_coordinates(self):
        src = _gradient(10, 6)
        resized = resize_image(src, 4, 3)
        src_px = src.load()
        dst_px = resized.load()
        for y in range(3):
            for x in range(4):
                assert dst_px[x, y] == src_px[x * 10 // 4, y * 6 // 3]

    def test_upscale_repeats_pixels(self):
        src = _gradient(2, 2)
        resized = resize_image(src, 4, 4)
        px = resized.load()
        src_px = src.load()
        assert px[0, 0] == px[1, 1] == src_px[0, 0]
        assert px[3, 3] == src_px[1, 1]

    def test_alpha_copied_verbatim(self):
        src = Image.new("RGBA", (8, 8), (10, 20, 30, 40))
        resized = resize_image(src, 3, 5)
        assert resized.mode == "RGBA"
        assert set(resized.getdata()) == {(10, 20, 30, 40)}

    def test_deterministic(self):
        src = _gradient(37, 23)
        a = resize_image(src, 11, 0)
        b = resize_image(src, 11, 0)
        assert a.tobytes() == b.tobytes()

    @pytest.mark.parametrize("mode", ["L", "RGB", "RGBA", "LA"])
    def test_keeps_array_modes(self, mode):
        src = Image.new(mode, (10, 10))
        assert resize_image(src, 5, 5).mode == mode

    def test_palette_converted_to_rgba(self):
        src = Image.new("P", (10, 10), 3)
        src.putpalette([0, 0, 0, 10, 10, 10, 20, 20, 20, 200, 100, 50])
        resized = resize_image(src, 5, 5)
        assert resized.mode == "RGBA"
        assert resized.getpixel((0, 0)) == (200, 100, 50, 255)


class TestInvalidInput:
    def test_zero_sized_source_raises(self):
        src = Image.new("RGB", (0, 0))
        with pytest.raises(EmptyImageError):
            resize_image(src, 10, 0)

    def test_empty_image_is_decode_error(self):
        assert issubclass(EmptyImageError, DecodeError)

    def test_negative_target_raises(self):
        with pytest.raises(ValueError):
            resize_image(Image.new("RGB", (4, 4)), -1, 2)


class TestResizeTo:
    def test_uses_dimension(self):
        src = Image.new("RGB", (100, 200))
        assert resize_to(src, Dimension(width=50, height=0)).size == (50, 100)

    def test_identity_returns_source(self):
        src = Image.new("CMYK", (7, 3))
        assert resize_to(src, Dimension()) is src
