"""Google Cloud Storage object store over the JSON API media endpoint."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import quote

import google.auth
import httpx
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request as AuthRequest

from imgresize.errors.exceptions import ConfigError, ObjectNotFoundError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://storage.googleapis.com"
READ_ONLY_SCOPE = "https://www.googleapis.com/auth/devstorage.read_only"
_DEFAULT_TIMEOUT = 30.0


def load_credentials(credentials_file: str | Path | None = None) -> Credentials:
    """Load a service-account or ADC credentials file, else Application Default Credentials.

    ``GOOGLE_APPLICATION_CREDENTIALS`` is honoured by the ADC lookup.
    """
    try:
        if credentials_file:
            credentials, _ = google.auth.load_credentials_from_file(
                str(credentials_file), scopes=[READ_ONLY_SCOPE]
            )
        else:
            credentials, _ = google.auth.default(scopes=[READ_ONLY_SCOPE])
    except DefaultCredentialsError as e:
        raise ConfigError(f"Failed to load GCS credentials: {e}") from e
    return credentials


class GCSObjectStore:
    """Downloads objects with ``GET /storage/v1/b/{bucket}/o/{key}?alt=media``.

    With ``credentials`` set, every request carries a bearer token that is
    refreshed when it expires; without them requests are anonymous (public
    buckets, emulators such as fake-gcs-server). ``user_project`` is only
    for requester-pays buckets. Requests are not retried.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        credentials: Credentials | None = None,
        user_project: str | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._user_project = user_project
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._refresh_lock = asyncio.Lock()

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    def object_url(self, bucket: str, key: str) -> str:
        return (
            f"{self._base_url}/storage/v1/b/{quote(bucket, safe='')}"
            f"/o/{quote(key, safe='')}"
        )

    async def fetch(self, bucket: str, key: str) -> bytes:
        params = {"alt": "media"}
        if self._user_project:
            params["userProject"] = self._user_project

        headers = await self._auth_headers()
        url = self.object_url(bucket, key)
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.error("GCS timeout: gs://%s/%s", bucket, key)
            raise UpstreamError(f"Timed out reading gs://{bucket}/{key}", original=e) from e
        except httpx.HTTPError as e:
            logger.error("GCS transport error for gs://%s/%s: %s", bucket, key, e)
            raise UpstreamError(f"Failed to read gs://{bucket}/{key}: {e}", original=e) from e

        if response.status_code == 404:
            raise ObjectNotFoundError(
                f"Object not found: gs://{bucket}/{key}", bucket=bucket, key=key
            )
        if response.is_error:
            logger.error(
                "GCS HTTP error %d for gs://%s/%s", response.status_code, bucket, key
            )
            raise UpstreamError(
                f"Failed to read gs://{bucket}/{key}: HTTP {response.status_code}",
                upstream_status=response.status_code,
            )
        return response.content

    async def close(self) -> None:
        await self._client.aclose()

    async def _auth_headers(self) -> dict[str, str]:
        if self._credentials is None:
            return {}
        async with self._refresh_lock:
            if not self._credentials.valid:
                logger.debug("Refreshing GCS access token")
                try:
                    await asyncio.to_thread(self._credentials.refresh, AuthRequest())
                except RefreshError as e:
                    logger.error("GCS token refresh failed: %s", e)
                    raise UpstreamError(f"Failed to refresh GCS credentials: {e}", original=e) from e
        return {"Authorization": f"Bearer {self._credentials.token}"}
