"""Tests for size spec parsing."""

import pytest

from imgresize.errors.exceptions import BadRequestError, InvalidSizeSpecError
from imgresize.resize.sizes import format_size, parse_size
from imgresize.types import Dimension


class TestParseSize:
    @pytest.mark.parametrize(
        ("spec", "width", "height"),
        [
            ("1000x1000", 1000, 1000),
            ("300x300", 300, 300),
            ("30x30", 30, 30),
            ("50x0", 50, 0),
            ("0x100", 0, 100),
            ("0x0", 0, 0),
            ("4294967295x1", 4294967295, 1),
            ("007x08", 7, 8),
        ],
    )
    def test_valid(self, spec, width, height):
        assert parse_size(spec) == Dimension(width=width, height=height)

    @pytest.mark.parametrize("spec", ["invalid", "100x", "x100", "", "x", "1x2x3", "100X100"])
    def test_invalid_format(self, spec):
        with pytest.raises(InvalidSizeSpecError) as exc_info:
            parse_size(spec)
        assert exc_info.value.error_type == "invalid_format"

    @pytest.mark.parametrize(
        "spec", ["-1x100", "100x-1", "abcx100", "1.5x2", " 1x2", "+1x2", "4294967296x1", "²x1"]
    )
    def test_invalid_dimension(self, spec):
        with pytest.raises(InvalidSizeSpecError) as exc_info:
            parse_size(spec)
        assert exc_info.value.error_type == "invalid_dimension"
        assert exc_info.value.spec == spec

    def test_is_bad_request(self):
        with pytest.raises(BadRequestError):
            parse_size("nope")

    def test_dimension_is_immutable(self):
        dim = parse_size("10x20")
        with pytest.raises(Exception):
            dim.width = 5


class TestFormatSize:
    def test_round_trip(self):
        assert format_size(parse_size("300x0")) == "300x0"
