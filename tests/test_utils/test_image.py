"""Tests for the Pillow codec helpers."""

import io

import pytest
from PIL import Image

from imgresize.errors.exceptions import BadRequestError, DecodeError
from imgresize.resize.engine import resize_image
from imgresize.types import ImageFormat
from imgresize.utils.image import (
    PillowCodec,
    decode_image,
    encode_image,
    load_image,
    save_image,
)


class TestDecode:
    def test_decodes_png(self, png_factory):
        img = decode_image(png_factory(7, 3))
        assert img.size == (7, 3)
        assert img.mode == "RGBA"

    def test_garbage_raises(self):
        with pytest.raises(DecodeError):
            decode_image(b"definitely not an image")

    def test_truncated_raises(self, png_factory):
        data = png_factory(50, 50)
        with pytest.raises(DecodeError):
            decode_image(data[: len(data) // 2])


class TestEncode:
    def test_png_keeps_alpha(self):
        img = Image.new("RGBA", (4, 4), (1, 2, 3, 4))
        out = Image.open(io.BytesIO(encode_image(img, ImageFormat.PNG)))
        assert out.format == "PNG"
        assert out.getpixel((0, 0)) == (1, 2, 3, 4)

    def test_jpeg_drops_alpha(self):
        img = Image.new("RGBA", (4, 4), (255, 0, 0, 128))
        out = Image.open(io.BytesIO(encode_image(img, ImageFormat.JPEG)))
        assert out.format == "JPEG"
        assert out.mode == "RGB"

    def test_jpeg_quality_affects_size(self):
        import numpy as np

        rng = np.random.default_rng(0)
        noisy = Image.fromarray(rng.integers(0, 256, (64, 64, 3), dtype=np.uint8))
        low = encode_image(noisy, ImageFormat.JPEG, quality=10)
        high = encode_image(noisy, ImageFormat.JPEG, quality=95)
        assert len(low) < len(high)

    def test_cmyk_source_to_png(self):
        buf = io.BytesIO()
        Image.new("CMYK", (4, 4), (0, 255, 255, 0)).save(buf, format="JPEG")
        img = decode_image(buf.getvalue())
        assert img.mode == "CMYK"

        out = Image.open(io.BytesIO(PillowCodec().encode(resize_image(img, 0, 0), ImageFormat.PNG)))
        assert out.format == "PNG"
        assert out.mode == "RGB"
        assert out.size == (4, 4)

    @pytest.mark.parametrize("mode", ["CMYK", "YCbCr", "HSV", "F"])
    @pytest.mark.parametrize("fmt", list(ImageFormat))
    def test_unwritable_modes_are_converted(self, mode, fmt):
        out = Image.open(io.BytesIO(encode_image(Image.new(mode, (3, 2)), fmt)))
        assert out.size == (3, 2)

    def test_unknown_format_is_bad_request(self):
        with pytest.raises(BadRequestError):
            encode_image(Image.new("RGB", (1, 1)), "gif")


class TestPillowCodec:
    def test_round_trip_dimensions(self, png_factory):
        codec = PillowCodec()
        img = codec.decode(png_factory(10, 20))
        data = codec.encode(img, ImageFormat.PNG)
        assert codec.decode(data).size == (10, 20)


class TestFileHelpers:
    def test_load_and_save(self, tmp_path, png_factory):
        src = tmp_path / "in.png"
        src.write_bytes(png_factory(5, 5))
        img = load_image(src)
        out = save_image(img, tmp_path / "out.jpg")
        assert Image.open(out).format == "JPEG"

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "nope.png")

    def test_save_unsupported_suffix(self, tmp_path):
        with pytest.raises(ValueError):
            save_image(Image.new("RGB", (1, 1)), tmp_path / "out.gif")
