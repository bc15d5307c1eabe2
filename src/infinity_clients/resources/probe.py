"""Connectivity checks and endpoint discovery against the mock API."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import dataclass

from infinity_clients.config import DEFAULT_MOCK_API_BASE_URL, DEFAULT_TIMEOUT
from infinity_clients.display.fields import truncate
from infinity_clients.exceptions import RequestError
from infinity_clients.http import JsonHttp

logger = logging.getLogger(__name__)

DISCOVERY_TIMEOUT = 5.0
BODY_PREVIEW_LENGTH = 500

COMMON_ENDPOINTS = ["/api", "/api/users", "/api/health", "/api/status", "/docs", "/swagger"]

DISCOVERY_PATHS = [
    # Basic data endpoints
    "/users", "/posts", "/products", "/todos", "/items", "/data",
    "/customers", "/orders", "/categories", "/comments", "/reviews",
    # Versioned
    "/api", "/api/v1", "/api/v2", "/api/users", "/api/posts", "/api/products",
    "/api/todos", "/api/items", "/api/data", "/api/customers", "/api/orders",
    # Health
    "/health", "/status", "/ping", "/heartbeat", "/ready", "/live",
    # Docs
    "/docs", "/swagger", "/redoc", "/openapi.json", "/api-docs",
    # Singular variants
    "/user", "/post", "/product", "/todo", "/item", "/datum",
    "/customer", "/order", "/category", "/comment", "/review",
]


@dataclass
class EndpointReport:
    """Outcome of probing one path. ``status_code`` is 0 when no response arrived."""

    path: str
    status_code: int
    content_type: str
    content_length: str
    success: bool
    body: str


class EndpointProbe:
    """Probes which endpoints a mock API server answers.

    Args:
        base_url: Mock API root (defaults as for ``ResourceClient``).
        timeout: Deadline for connection checks.
        discovery_timeout: Shorter deadline used per path during discovery.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        discovery_timeout: float = DISCOVERY_TIMEOUT,
        transport=None,
    ):
        base_url = base_url or os.environ.get("MOCK_API_BASE_URL") or DEFAULT_MOCK_API_BASE_URL
        self.base_url = base_url.rstrip("/")
        self._http = JsonHttp(timeout=timeout, transport=transport)
        self._discovery_http = JsonHttp(timeout=discovery_timeout, transport=transport)

    def test_connection(self) -> bool:
        """True if the server answers at all; a 404 at the root still counts."""
        try:
            response = self._http.request("GET", self.base_url)
        except RequestError as e:
            logger.warning(f"Mock API unreachable at {self.base_url}: {e}")
            return False
        reachable = 200 <= response.status_code < 500
        if not reachable:
            logger.warning(f"Mock API server error: {response.status_code}")
        return reachable

    def test_endpoint(self, path: str) -> bool:
        """True only for a 2xx answer."""
        try:
            response = self._http.request("GET", f"{self.base_url}{path}")
        except RequestError as e:
            logger.debug(f"Endpoint test failed for {path}: {e}")
            return False
        return response.is_success

    def test_common_endpoints(self) -> dict[str, bool]:
        return {path: self.test_endpoint(path) for path in COMMON_ENDPOINTS}

    def discover_endpoints(self, paths: list[str] | None = None) -> dict[str, EndpointReport]:
        """Probe each path in turn and report what came back."""
        results = {}
        for path in paths if paths is not None else DISCOVERY_PATHS:
            results[path] = self._probe(path)

        available = [path for path, report in results.items() if report.success]
        logger.info(f"Discovery complete: {len(available)}/{len(results)} endpoints available")
        return results

    def _probe(self, path: str) -> EndpointReport:
        try:
            response = self._discovery_http.request("GET", f"{self.base_url}{path}")
        except RequestError as e:
            logger.debug(f"{path}: error - {e}")
            return EndpointReport(
                path=path,
                status_code=0,
                content_type="error",
                content_length="0",
                success=False,
                body=f"Error: {e}",
            )
        content_type = response.headers.get("content-type", "unknown")
        return EndpointReport(
            path=path,
            status_code=response.status_code,
            content_type=content_type,
            content_length=response.headers.get("content-length", "unknown"),
            success=response.is_success,
            body=preview_body(response.text, content_type),
        )

    # ---- Async wrappers (asyncio.to_thread) ----

    async def atest_connection(self) -> bool:
        return await asyncio.to_thread(self.test_connection)

    async def atest_endpoint(self, path: str) -> bool:
        return await asyncio.to_thread(self.test_endpoint, path)

    async def adiscover_endpoints(self, paths: list[str] | None = None) -> dict[str, EndpointReport]:
        return await asyncio.to_thread(self.discover_endpoints, paths)


def preview_body(body: str, content_type: str | None = None) -> str:
    """Short, single-line preview of a response body."""
    if not body:
        return "Empty response"
    body = truncate(body, BODY_PREVIEW_LENGTH)
    if content_type and "json" in content_type:
        try:
            return json.dumps(json.loads(body), separators=(",", ":"))
        except ValueError:
            return body
    return body
