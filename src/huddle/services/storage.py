"""Object storage client for community images."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

import httpx

from huddle.core.settings import settings
from huddle.services.http import build_async_client, with_retry

logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400
IMAGE_FOLDER = "community_images"


class StorageError(RuntimeError):
    """Raised when an upload fails."""


class StorageDisabledError(StorageError):
    """Raised when storage credentials are not configured."""


@dataclass(frozen=True)
class StorageConfig:
    """Immutable configuration for the storage service."""

    base_url: str | None
    service_key: str | None
    bucket: str


def load_storage_config() -> StorageConfig:
    """Build configuration object from global settings."""
    return StorageConfig(
        base_url=settings.storage_url,
        service_key=settings.storage_service_key,
        bucket=settings.storage_bucket,
    )


def build_object_path(filename: str, user_id: int) -> str:
    """Return ``community_images/{user_id}_{random}.{ext}`` for an upload."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    return f"{IMAGE_FOLDER}/{user_id}_{secrets.token_hex(6)}.{ext}"


class StorageClient:
    """Uploads objects and resolves their public URLs."""

    def __init__(
        self,
        config: StorageConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_storage_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.config.base_url and self.config.service_key)

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise StorageDisabledError("Storage service is not configured")
        if self._client is None:
            self._client = build_async_client(
                f"{self.config.base_url}/storage/v1",
                {"Authorization": f"Bearer {self.config.service_key}"},
                transport=self._transport,
            )
        return self._client

    def public_url(self, path: str) -> str:
        return f"{self.config.base_url}/storage/v1/object/public/{self.config.bucket}/{path}"

    async def upload_community_image(
        self,
        data: bytes,
        filename: str,
        user_id: int,
        *,
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload an image and return its public URL."""
        client = self._ensure_client()
        path = build_object_path(filename, user_id)
        try:
            response = await with_retry(
                lambda: client.post(
                    f"/object/{self.config.bucket}/{path}",
                    content=data,
                    headers={"Content-Type": content_type},
                )
            )
        except (httpx.HTTPError, OSError) as exc:
            logger.error("Upload of %s failed: %s", path, exc)
            raise StorageError(f"Upload failed: {exc}") from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            logger.error("Storage responded %d for %s", response.status_code, path)
            raise StorageError(f"Storage responded with {response.status_code}")
        return self.public_url(path)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_storage_client: StorageClient | None = None


def get_storage_client() -> StorageClient:
    """Return the process-wide storage client."""
    global _storage_client
    if _storage_client is None:
        _storage_client = StorageClient()
    return _storage_client
