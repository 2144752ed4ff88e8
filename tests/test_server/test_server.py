"""Tests for the HTTP route."""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from imgresize.config.schema import AppConfig, ServerConfig
from imgresize.core import ImageResizer
from imgresize.server import create_app


@pytest.fixture
def resizer(tmp_path, catalog, object_store, codec):
    config = AppConfig(
        buckets=dict(catalog.buckets),
        assortments={"avatar": dict(catalog.assortments["avatar"])},
        server=ServerConfig(cache_dir=str(tmp_path / "cache"), max_cache_files=10),
    )
    return ImageResizer(config, object_store=object_store, codec=codec)


@pytest.fixture
def client(resizer):
    with TestClient(create_app(resizer)) as client:
        yield client


class TestServeRoute:
    def test_miss_then_hit(self, client, object_store):
        first = client.get("/images/avatar/user/42/medium.png")
        assert first.status_code == 200
        assert first.headers["content-type"] == "image/png"
        assert first.headers["x-cache"] == "MISS"
        assert Image.open(io.BytesIO(first.content)).size == (300, 300)

        second = client.get("/images/avatar/user/42/medium.png")
        assert second.status_code == 200
        assert second.headers["x-cache"] == "HIT"
        assert second.content == first.content
        assert len(object_store.fetch_calls) == 1

    def test_jpeg_content_type(self, client):
        response = client.get("/images/avatar/user/42/small.jpg")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert "max-age" in response.headers["cache-control"]

    def test_malformed_path(self, client):
        response = client.get("/images/avatar")
        assert response.status_code == 400

    def test_unknown_assortment(self, client):
        response = client.get("/images/banner/user/42/tall.png")
        assert response.status_code == 400
        assert "assortment" in response.text

    def test_unsupported_extension(self, client):
        response = client.get("/images/avatar/user/42/medium.gif")
        assert response.status_code == 400

    def test_not_found(self, client):
        response = client.get("/images/avatar/missing/medium.png")
        assert response.status_code == 404

    def test_decode_error(self, client, object_store):
        object_store.objects[("bucket-1", "corrupt")] = b"garbage"
        response = client.get("/images/avatar/corrupt/medium.png")
        assert response.status_code == 500


class TestLifespan:
    def test_closes_object_store_on_shutdown(self, resizer, object_store):
        with TestClient(create_app(resizer)):
            assert object_store.closed is False
        assert object_store.closed is True
