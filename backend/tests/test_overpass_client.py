import asyncio

import httpx
import pytest

from nearby_poi.core.exceptions import (
    POIFetchError,
    POINetworkError,
    POIParseError,
    POIRateLimitError,
)
from nearby_poi.services.overpass_client import OverpassClient

URL = "https://overpass.test/api/interpreter"


def _client(handler, timeout: float = 10.0) -> OverpassClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OverpassClient(url=URL, timeout=timeout, client=http_client)


@pytest.mark.asyncio
async def test_fetch_posts_form_encoded_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["data"] = httpx.QueryParams(request.content.decode()).get("data")
        return httpx.Response(200, json={"version": 0.6, "elements": [{"type": "node", "id": 1}]})

    elements = await _client(handler).fetch_elements("[out:json];node(1);out;")

    assert elements == [{"type": "node", "id": 1}]
    assert seen["method"] == "POST"
    assert seen["url"] == URL
    assert seen["content_type"] == "application/x-www-form-urlencoded"
    assert seen["data"] == "[out:json];node(1);out;"


@pytest.mark.asyncio
async def test_http_429_raises_rate_limit_error():
    client = _client(lambda request: httpx.Response(429, text="Too Many Requests"))
    with pytest.raises(POIRateLimitError) as exc_info:
        await client.fetch_elements("q")
    assert exc_info.value.code == "RATE_LIMIT"
    assert isinstance(exc_info.value, POIFetchError)


@pytest.mark.asyncio
async def test_server_error_raises_network_error():
    client = _client(lambda request: httpx.Response(504, text="Gateway Timeout"))
    with pytest.raises(POINetworkError) as exc_info:
        await client.fetch_elements("q")
    assert exc_info.value.code == "NETWORK_ERROR"
    assert "HTTP 504" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(POINetworkError, match="Network error"):
        await _client(handler).fetch_elements("q")


@pytest.mark.asyncio
async def test_slow_request_is_cancelled_on_timeout():
    cancelled = asyncio.Event()

    async def handler(request):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200, json={"elements": []})

    with pytest.raises(POINetworkError, match="Request timeout"):
        await _client(handler, timeout=0.05).fetch_elements("q")
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_invalid_json_raises_parse_error():
    client = _client(lambda request: httpx.Response(200, text="<html>busy</html>"))
    with pytest.raises(POIParseError) as exc_info:
        await client.fetch_elements("q")
    assert exc_info.value.code == "PARSE_ERROR"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[], {"remark": "runtime error"}, {"elements": {"a": 1}}])
async def test_wrong_shape_raises_parse_error(payload):
    client = _client(lambda request: httpx.Response(200, json=payload))
    with pytest.raises(POIParseError):
        await client.fetch_elements("q")


@pytest.mark.asyncio
async def test_aclose_releases_its_own_client():
    client = OverpassClient(url=URL)
    assert client._client.is_closed is False

    await client.aclose()
    assert client._client.is_closed is True


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open():
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"elements": []}))
    )
    client = OverpassClient(url=URL, client=http_client)

    await client.aclose()
    assert http_client.is_closed is False
    assert await client.fetch_elements("q") == []
    await http_client.aclose()
