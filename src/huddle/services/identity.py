"""Identity provider client.

Wraps the identity provider's backend API for the two writes the onboarding
flow needs: merging user metadata and replacing the profile image. Sign-in
and token issuance stay entirely with the provider.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from huddle.core.settings import settings
from huddle.services.http import build_async_client, with_retry

logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400


class IdentityError(RuntimeError):
    """Base exception raised for identity-provider failures."""


class IdentityDisabledError(IdentityError):
    """Raised when identity operations are attempted without credentials."""


@dataclass(frozen=True)
class IdentityConfig:
    """Immutable configuration for identity-provider calls."""

    base_url: str
    secret_key: str | None


def load_identity_config() -> IdentityConfig:
    """Build configuration object from global settings."""
    return IdentityConfig(
        base_url=settings.identity_api_url,
        secret_key=settings.identity_secret_key,
    )


class IdentityClient:
    """HTTP client wrapper for the identity provider's user API."""

    def __init__(
        self,
        config: IdentityConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_identity_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.config.secret_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise IdentityDisabledError("Identity provider is not configured")

        async with self._client_lock:
            if self._client is None:
                headers = {"Authorization": f"Bearer {self.config.secret_key}"}
                self._client = build_async_client(
                    self.config.base_url, headers, transport=self._transport
                )
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = await self._ensure_client()
        try:
            response = await with_retry(lambda: client.request(method, path, **kwargs))
        except (httpx.HTTPError, OSError) as exc:
            logger.warning("Identity provider request %s %s failed: %s", method, path, exc)
            raise IdentityError(f"Identity provider request failed: {exc}") from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            logger.warning(
                "Identity provider responded %d to %s %s", response.status_code, method, path
            )
            raise IdentityError(f"Identity provider responded with {response.status_code}")
        return response

    async def update_metadata(
        self,
        user_id: str,
        *,
        public: dict[str, Any] | None = None,
        unsafe: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Deep-merge metadata into the identity-provider user record."""
        body: dict[str, Any] = {}
        if public is not None:
            body["public_metadata"] = public
        if unsafe is not None:
            body["unsafe_metadata"] = unsafe
        response = await self._request("PATCH", f"/v1/users/{user_id}/metadata", json=body)
        return response.json()

    async def update_profile_image(
        self,
        user_id: str,
        data: bytes,
        *,
        filename: str = "profile.jpg",
        content_type: str = "image/jpeg",
    ) -> dict[str, Any]:
        """Replace the user's profile image."""
        files = {"file": (filename, data, content_type)}
        response = await self._request("POST", f"/v1/users/{user_id}/profile_image", files=files)
        return response.json()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_identity_client: IdentityClient | None = None


def get_identity_client() -> IdentityClient:
    """Return the process-wide identity client."""
    global _identity_client
    if _identity_client is None:
        _identity_client = IdentityClient()
    return _identity_client
