"""Size spec parsing — ``"<width>x<height>"`` strings to Dimension."""

from __future__ import annotations

from imgresize.errors.exceptions import InvalidSizeSpecError
from imgresize.types import Dimension

_SEPARATOR = "x"
_MAX_DIMENSION = 2**32 - 1  # unsigned 32-bit


def parse_size(spec: str) -> Dimension:
    """Parse a size spec such as ``"1000x1000"`` or ``"300x0"``.

    Raises InvalidSizeSpecError with ``error_type="invalid_format"`` when the
    string does not split into exactly two non-empty parts, and
    ``error_type="invalid_dimension"`` when a part is not an unsigned integer.
    """
    parts = spec.split(_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidSizeSpecError(
            f"invalid size format: {spec!r}", error_type="invalid_format", spec=spec
        )

    width = _parse_dimension(parts[0], spec, "width")
    height = _parse_dimension(parts[1], spec, "height")
    return Dimension(width=width, height=height)


def format_size(dimension: Dimension) -> str:
    return f"{dimension.width}{_SEPARATOR}{dimension.height}"


def _parse_dimension(part: str, spec: str, axis: str) -> int:
    # str.isdigit() accepts non-ASCII digits such as "²"; int() would not.
    if not (part.isascii() and part.isdigit()):
        raise InvalidSizeSpecError(
            f"invalid {axis}: {part!r}", error_type="invalid_dimension", spec=spec
        )
    value = int(part)
    if value > _MAX_DIMENSION:
        raise InvalidSizeSpecError(
            f"{axis} out of range: {part}", error_type="invalid_dimension", spec=spec
        )
    return value
