"""Country/state/city lookup client.

Thin proxy over the third-party location API. Responses are passed through
unchanged; the option helpers shape them for select inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from huddle.core.settings import settings
from huddle.schemas.location import CityOption, CountryOption
from huddle.services.http import build_async_client, with_retry

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-CSCAPI-KEY"


class LocationError(RuntimeError):
    """Raised when the location API cannot be reached or answers with an error."""


class LocationNotConfiguredError(LocationError):
    """Raised when no API key is configured."""


@dataclass(frozen=True)
class LocationConfig:
    """Immutable configuration for the location API."""

    base_url: str
    api_key: str | None


def load_location_config() -> LocationConfig:
    """Build configuration object from global settings."""
    return LocationConfig(base_url=settings.location_api_url, api_key=settings.location_api_key)


class LocationClient:
    """HTTP client for country and city listings."""

    def __init__(
        self,
        config: LocationConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_location_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self.config.api_key:
            raise LocationNotConfiguredError("API key not configured")
        if self._client is None:
            self._client = build_async_client(
                self.config.base_url,
                {API_KEY_HEADER: self.config.api_key},
                transport=self._transport,
            )
        return self._client

    async def _get_list(self, path: str) -> list[dict[str, Any]]:
        client = self._ensure_client()
        try:
            response = await with_retry(lambda: client.get(path))
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, OSError, ValueError) as exc:
            logger.error("Error fetching %s: %s", path, exc)
            raise LocationError(f"Location API request failed: {exc}") from exc

        if not isinstance(data, list):
            raise LocationError("Location API returned an unexpected payload")
        return data

    async def fetch_countries(self) -> list[dict[str, Any]]:
        """Return the raw country list."""
        return await self._get_list("/countries")

    async def fetch_cities(self, country_code: str) -> list[dict[str, Any]]:
        """Return the raw city list for an ISO2 country code."""
        if not country_code:
            raise ValueError("Country code is required")
        return await self._get_list(f"/countries/{country_code}/cities")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def country_options(countries: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Shape raw countries into ``{value, label, full_name}`` sorted by label."""
    options = [
        CountryOption(value=c["iso2"], label=c["name"], full_name=c["name"])
        for c in countries
        if c.get("iso2") and c.get("name")
    ]
    return [o.model_dump() for o in sorted(options, key=lambda o: o.label.casefold())]


def city_options(cities: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Shape raw cities into ``{id, value, label}`` sorted by label."""
    options = [
        CityOption(id=c.get("id"), value=c["name"], label=c["name"])
        for c in cities
        if c.get("name")
    ]
    return [o.model_dump() for o in sorted(options, key=lambda o: o.label.casefold())]


_location_client: LocationClient | None = None


def get_location_client() -> LocationClient:
    """Return the process-wide location client."""
    global _location_client
    if _location_client is None:
        _location_client = LocationClient()
    return _location_client
