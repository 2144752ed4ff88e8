import io

import pytest
from PIL import Image

from imgresize.errors.exceptions import ObjectNotFoundError
from imgresize.types import Catalog, ImageFormat
from imgresize.utils.image import PillowCodec


def make_png(width: int, height: int, color=(255, 0, 0, 255), mode: str = "RGBA") -> bytes:
    img = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class FakeObjectStore:
    """In-memory object store that counts fetches."""

    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None) -> None:
        self.objects = dict(objects or {})
        self.fetch_calls: list[tuple[str, str]] = []
        self.closed = False

    async def fetch(self, bucket: str, key: str) -> bytes:
        self.fetch_calls.append((bucket, key))
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise ObjectNotFoundError(f"Object not found: {bucket}/{key}", bucket=bucket, key=key)

    async def close(self) -> None:
        self.closed = True


class CountingCodec:
    """Pillow codec that records decode/encode calls."""

    def __init__(self) -> None:
        self._inner = PillowCodec()
        self.decode_calls = 0
        self.encode_calls = 0
        self.encoded_formats: list[ImageFormat] = []

    def decode(self, data: bytes) -> Image.Image:
        self.decode_calls += 1
        return self._inner.decode(data)

    def encode(self, image: Image.Image, fmt: ImageFormat, quality: int = 85) -> bytes:
        self.encode_calls += 1
        self.encoded_formats.append(fmt)
        return self._inner.encode(image, fmt, quality=quality)


@pytest.fixture
def catalog():
    return Catalog(
        buckets={"images": "bucket-1", "assets": "bucket-2"},
        assortments={
            "avatar": {"large": "1000x1000", "medium": "300x300", "small": "50x0"},
            "banner": {"tall": "0x40", "original": "0x0", "broken": "100y100"},
        },
    )


@pytest.fixture
def red_png():
    """100x100 opaque red PNG."""
    return make_png(100, 100)


@pytest.fixture
def object_store(red_png):
    return FakeObjectStore({("bucket-1", "user/42"): red_png})


@pytest.fixture
def codec():
    return CountingCodec()


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Write a minimal config YAML and return its path."""
    content = f"""
buckets:
  test: "test-bucket"
  demo: "demo-bucket"
assortments:
  avatar:
    large: 1000x1000
    medium: 300x300
    small: 30x30
server:
  port: 9000
  cache_dir: "{tmp_path / 'cache'}"
  max_cache_files: 50
"""
    path = tmp_path / "config.yaml"
    path.write_text(content)
    return path


@pytest.fixture
def png_factory():
    return make_png
