"""Location proxy endpoints with a fixed 24-hour cache directive."""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from huddle.api.v1.dependencies import LocationClientDep
from huddle.core.settings import settings
from huddle.services.locations import (
    LocationError,
    LocationNotConfiguredError,
    city_options,
    country_options,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])

FormatParam = Literal["raw", "options"]


def _cached(content: Any) -> JSONResponse:
    return JSONResponse(
        content=content,
        headers={"Cache-Control": f"public, max-age={settings.location_cache_seconds}"},
    )


def _error(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/countries")
async def get_countries(
    client: LocationClientDep,
    output_format: FormatParam = Query("raw", alias="format"),
) -> JSONResponse:
    """Proxy the country list."""
    try:
        countries = await client.fetch_countries()
    except LocationNotConfiguredError:
        return _error("API key not configured")
    except LocationError as err:
        logger.error("Error fetching countries: %s", err)
        return _error("Failed to fetch countries")
    return _cached(country_options(countries) if output_format == "options" else countries)


@router.get("/cities/{country_code}")
async def get_cities(
    country_code: str,
    client: LocationClientDep,
    output_format: FormatParam = Query("raw", alias="format"),
) -> JSONResponse:
    """Proxy the city list of a country."""
    if not country_code.strip():
        return _error("Country code is required", status.HTTP_400_BAD_REQUEST)
    try:
        cities = await client.fetch_cities(country_code.strip())
    except LocationNotConfiguredError:
        return _error("API key not configured")
    except LocationError as err:
        logger.error("Error fetching cities: %s", err)
        return _error("Failed to fetch cities")
    return _cached(city_options(cities) if output_format == "options" else cities)
