"""Environment configuration for the identity and mock API clients."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from infinity_clients.exceptions import ConfigurationError

DEFAULT_MOCK_API_BASE_URL = "https://mock-server-6yyu.onrender.com"
DEFAULT_IDENTITY_BASE_URL = "https://identitytoolkit.googleapis.com/v1"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class Environment:
    """Resolved configuration values.

    Secrets have no defaults: the API key must come from the process
    environment or a ``.env`` file.
    """

    firebase_api_key: str = ""
    mock_api_base_url: str = DEFAULT_MOCK_API_BASE_URL
    identity_base_url: str = DEFAULT_IDENTITY_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> Environment:
        """Load ``.env`` (process variables win) and read the known keys."""
        load_dotenv(dotenv_path=dotenv_path, override=False)
        return cls(
            firebase_api_key=os.environ.get("FIREBASE_API_KEY", ""),
            mock_api_base_url=os.environ.get("MOCK_API_BASE_URL") or DEFAULT_MOCK_API_BASE_URL,
            identity_base_url=os.environ.get("IDENTITY_BASE_URL") or DEFAULT_IDENTITY_BASE_URL,
            timeout=_parse_timeout(os.environ.get("REQUEST_TIMEOUT")),
        )

    def auth_client(self, **kwargs):
        from infinity_clients.auth.client import AuthClient

        return AuthClient(
            api_key=self.firebase_api_key,
            base_url=self.identity_base_url,
            timeout=self.timeout,
            **kwargs,
        )

    def resource_client(self, **kwargs):
        from infinity_clients.resources.client import ResourceClient

        return ResourceClient(base_url=self.mock_api_base_url, timeout=self.timeout, **kwargs)

    def token_auth_client(self, **kwargs):
        from infinity_clients.auth.token import TokenAuthClient

        return TokenAuthClient(base_url=self.mock_api_base_url, timeout=self.timeout, **kwargs)


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"REQUEST_TIMEOUT must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"REQUEST_TIMEOUT must be positive, got {raw!r}")
    return value
