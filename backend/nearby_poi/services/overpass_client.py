import asyncio
import json
import logging
from typing import Any, List, Optional

import httpx

from nearby_poi.core.config import settings
from nearby_poi.core.exceptions import POINetworkError, POIParseError, POIRateLimitError
from nearby_poi.core.logger import logs


class OverpassClient:
    """
    Thin async client for an Overpass interpreter endpoint.

    When no ``client`` is given the instance opens its own ``httpx.AsyncClient``
    and ``aclose()`` releases it. An injected client (tests pass one with a
    ``MockTransport``) belongs to the caller and is left open.
    """

    def __init__(
        self,
        url: str = settings.OVERPASS_URL,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()
        self.headers = {"User-Agent": settings.USER_AGENT}

    async def fetch_elements(self, query: str) -> List[Any]:
        """POSTs the query and returns the raw ``elements`` list."""
        logs.log(logging.DEBUG, f"Overpass query:\n{query}")

        try:
            response = await self._post(self._client, query)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logs.log(logging.ERROR, f"Overpass request timed out after {self.timeout}s")
            raise POINetworkError("Request timeout") from e
        except httpx.HTTPError as e:
            logs.log(logging.ERROR, f"Overpass transport error: {str(e)}")
            raise POINetworkError(f"Network error: {str(e)}") from e

        if response.status_code == 429:
            logs.log(logging.WARNING, "Overpass API rate limit hit (HTTP 429)")
            raise POIRateLimitError("Rate limit exceeded. Please try again later.")

        if not response.is_success:
            logs.log(
                logging.ERROR,
                f"Overpass API error: HTTP {response.status_code}",
                extra={"body": response.text[:500]},
            )
            raise POINetworkError(
                f"HTTP {response.status_code}: {response.reason_phrase} - {response.text[:200]}"
            )

        return self._decode(response)

    async def _post(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        # wait_for bounds the whole exchange and cancels it on expiry
        return await asyncio.wait_for(
            client.post(
                self.url,
                data={"data": query},
                headers=self.headers,
                timeout=self.timeout,
            ),
            timeout=self.timeout,
        )

    def _decode(self, response: httpx.Response) -> List[Any]:
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logs.log(logging.ERROR, f"Overpass returned invalid JSON: {str(e)}")
            raise POIParseError(f"Invalid JSON from Overpass: {str(e)}") from e

        if not isinstance(payload, dict):
            raise POIParseError(f"Expected a JSON object, got {type(payload).__name__}")

        elements = payload.get("elements")
        if not isinstance(elements, list):
            if payload.get("remark"):
                logs.log(logging.WARNING, f"Overpass remark: {payload['remark']}")
            raise POIParseError("Overpass response has no 'elements' list")

        return elements

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
