"""Shared pytest fixtures."""

import httpx
import pytest

ENV_KEYS = [
    "FIREBASE_API_KEY",
    "MOCK_API_BASE_URL",
    "IDENTITY_BASE_URL",
    "REQUEST_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Unset config variables and restore them (or their absence) afterwards."""
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def seen_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def transport_for(seen_requests):
    """Build an ``httpx.MockTransport`` from ``{path: outcome}``.

    An outcome is ``(status, body)`` or an exception to raise. Dict and list
    bodies are sent as JSON, strings as raw text. Unknown paths answer 404.
    """

    def build(routes: dict) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            seen_requests.append(request)
            outcome = routes.get(request.url.path)
            if outcome is None:
                return httpx.Response(404, json={"detail": "Not Found"})
            if isinstance(outcome, Exception):
                raise outcome
            status, body = outcome
            if isinstance(body, str):
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=body)

        return httpx.MockTransport(handler)

    return build
