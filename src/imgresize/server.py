"""HTTP surface: one GET route serving resized variants."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

from imgresize.core import ImageResizer
from imgresize.errors.exceptions import ImgResizeError

logger = logging.getLogger(__name__)

APP_NAME = "imgresize"
_CACHE_CONTROL = "public, max-age=86400"


def create_app(resizer: ImageResizer) -> FastAPI:
    """Build the FastAPI app around a configured ImageResizer.

    ``GET /{bucket_alias}/{assortment}/{object_key...}/{size}.{ext}``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await resizer.close()

    app = FastAPI(title=APP_NAME, lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.resizer = resizer

    @app.get("/{request_path:path}")
    async def serve_image(request_path: str) -> Response:
        try:
            result = await resizer.serve(request_path)
        except ImgResizeError as e:
            if e.http_status >= 500:
                logger.error("[%s] %s: %s", e.kind.value, request_path, e.message)
            else:
                logger.info("[%s] %s: %s", e.kind.value, request_path, e.message)
            return PlainTextResponse(e.message, status_code=e.http_status)

        return Response(
            content=result.content,
            media_type=result.content_type,
            headers={
                "X-Cache": "HIT" if result.cache_hit else "MISS",
                "Cache-Control": _CACHE_CONTROL,
            },
        )

    return app


def run_server(resizer: ImageResizer, host: str, port: int, log_level: str = "info") -> None:
    import uvicorn

    uvicorn.run(create_app(resizer), host=host, port=port, log_level=log_level.lower())
