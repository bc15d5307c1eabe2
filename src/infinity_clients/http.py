"""JSON-over-HTTP request wrapper with sync and async interfaces.

Every request opens its own ``httpx`` client, is bounded by one overall
deadline and translates transport failures into the ``RequestError`` family.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator

import httpx

from infinity_clients.config import DEFAULT_TIMEOUT
from infinity_clients.exceptions import (
    HttpStatusError,
    NetworkUnreachableError,
    RequestTimeoutError,
    ResponseDecodeError,
)

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_headers(token: str | None = None) -> dict[str, str]:
    """JSON headers, plus a bearer ``Authorization`` header when a token is given."""
    headers = dict(JSON_HEADERS)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def decode_json(response: httpx.Response) -> Any:
    """Decode a response body, raising ``ResponseDecodeError`` on bad JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise ResponseDecodeError(
            f"Invalid JSON in response from {response.request.url}: {e}",
            status_code=response.status_code,
        ) from e


def expect_ok(response: httpx.Response, expected: tuple[int, ...] = (200,)) -> None:
    if response.status_code not in expected:
        raise HttpStatusError(
            f"Request to {response.request.url} failed: HTTP {response.status_code}",
            status_code=response.status_code,
        )


class JsonHttp:
    """Issues one JSON request per call under a fixed overall deadline.

    ``timeout`` bounds the whole call, body included, not just each
    connect/read phase.

    Args:
        timeout: Per-request deadline in seconds (default 10).
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, transport=None):
        self.timeout = timeout
        self._transport = transport

    def _timed_out(self, method: str, url: str) -> RequestTimeoutError:
        logger.warning(f"{method} {url} timed out after {self.timeout}s")
        return RequestTimeoutError(f"Request to {url} timed out after {self.timeout}s")

    @contextmanager
    def _translate_errors(self, method: str, url: str) -> Iterator[None]:
        try:
            yield
        except httpx.TimeoutException as e:
            raise self._timed_out(method, url) from e
        except httpx.DecodingError as e:
            logger.warning(f"{method} {url} returned an undecodable body: {e}")
            raise ResponseDecodeError(f"Could not decode response from {url}: {e}") from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise NetworkUnreachableError(f"Network error reaching {url}: {e}") from e
        except httpx.RequestError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise NetworkUnreachableError(f"Request to {url} failed: {e}") from e
        except httpx.InvalidURL as e:
            raise NetworkUnreachableError(f"Invalid URL {url}: {e}") from e

    def request(
        self,
        method: str,
        url: str,
        token: str | None = None,
        payload: Any = None,
        params: dict | None = None,
    ) -> httpx.Response:
        """Send a request and return the fully read response, whatever its status."""
        logger.debug(f"{method} {url}")
        deadline = time.monotonic() + self.timeout
        with self._translate_errors(method, url):
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                with client.stream(
                    method,
                    url,
                    headers=build_headers(token),
                    json=payload,
                    params=params,
                ) as streamed:
                    body = bytearray()
                    for chunk in streamed.iter_bytes():
                        body.extend(chunk)
                        if time.monotonic() > deadline:
                            raise self._timed_out(method, url)
                    if time.monotonic() > deadline:
                        raise self._timed_out(method, url)
            response = httpx.Response(
                streamed.status_code,
                headers=_decoded_headers(streamed.headers),
                content=bytes(body),
                request=streamed.request,
            )
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def arequest(
        self,
        method: str,
        url: str,
        token: str | None = None,
        payload: Any = None,
        params: dict | None = None,
    ) -> httpx.Response:
        """Async version of request."""
        logger.debug(f"{method} {url}")
        with self._translate_errors(method, url):
            try:
                response = await asyncio.wait_for(
                    self._asend(method, url, token, payload, params), self.timeout
                )
            except asyncio.TimeoutError as e:
                raise self._timed_out(method, url) from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def _asend(self, method, url, token, payload, params) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.request(
                method,
                url,
                headers=build_headers(token),
                json=payload,
                params=params,
            )

    def get_json(self, url: str, token: str | None = None) -> Any:
        """GET a URL and decode its JSON body; non-200 raises ``HttpStatusError``."""
        response = self.request("GET", url, token=token)
        expect_ok(response)
        return decode_json(response)

    async def aget_json(self, url: str, token: str | None = None) -> Any:
        """Async version of get_json."""
        response = await self.arequest("GET", url, token=token)
        expect_ok(response)
        return decode_json(response)


def _decoded_headers(headers: httpx.Headers) -> httpx.Headers:
    """Headers for a body that has already been decoded and reassembled."""
    headers = headers.copy()
    for name in ("content-encoding", "content-length", "transfer-encoding"):
        if name in headers:
            del headers[name]
    return headers
