"""Tests for the location API client."""

import httpx
import pytest

from huddle.services.locations import (
    API_KEY_HEADER,
    LocationClient,
    LocationConfig,
    LocationError,
    LocationNotConfiguredError,
    city_options,
    country_options,
)

CONFIG = LocationConfig(base_url="https://locations.test/v1", api_key="csc-key")


async def test_fetch_countries_sends_api_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"name": "Chile", "iso2": "CL"}])

    client = LocationClient(CONFIG, transport=httpx.MockTransport(handler))
    assert await client.fetch_countries() == [{"name": "Chile", "iso2": "CL"}]
    await client.close()

    (request,) = seen
    assert request.url.path == "/v1/countries"
    assert request.headers[API_KEY_HEADER] == "csc-key"


async def test_fetch_cities_path() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[])

    client = LocationClient(CONFIG, transport=httpx.MockTransport(handler))
    assert await client.fetch_cities("CL") == []
    await client.close()
    assert seen == ["/v1/countries/CL/cities"]


async def test_fetch_cities_requires_code() -> None:
    client = LocationClient(CONFIG, transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with pytest.raises(ValueError):
        await client.fetch_cities("")


async def test_upstream_error_status() -> None:
    client = LocationClient(
        CONFIG, transport=httpx.MockTransport(lambda r: httpx.Response(401, json={"error": "x"}))
    )
    with pytest.raises(LocationError):
        await client.fetch_countries()
    await client.close()


async def test_unexpected_payload() -> None:
    client = LocationClient(
        CONFIG, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"oops": 1}))
    )
    with pytest.raises(LocationError):
        await client.fetch_countries()
    await client.close()


async def test_missing_api_key() -> None:
    client = LocationClient(LocationConfig(base_url="https://locations.test/v1", api_key=None))
    with pytest.raises(LocationNotConfiguredError):
        await client.fetch_countries()


def test_option_helpers_drop_incomplete_entries() -> None:
    assert country_options([{"name": "Chile"}, {"name": "Peru", "iso2": "PE"}]) == [
        {"value": "PE", "label": "Peru", "full_name": "Peru"}
    ]
    assert city_options([{"id": 1}, {"id": 2, "name": "Lima"}]) == [
        {"id": 2, "value": "Lima", "label": "Lima"}
    ]
