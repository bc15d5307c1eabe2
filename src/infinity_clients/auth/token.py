"""Bearer-token login against the mock API server."""

from __future__ import annotations

import logging
import os

import httpx

from infinity_clients.auth.models import AuthResult, Session, default_display_name
from infinity_clients.config import DEFAULT_MOCK_API_BASE_URL, DEFAULT_TIMEOUT
from infinity_clients.display.fields import first_present
from infinity_clients.exceptions import AuthRejectedError, InfinityClientError
from infinity_clients.http import JsonHttp, decode_json

logger = logging.getLogger(__name__)

LOGIN_ENDPOINTS = [
    "/auth/login",
    "/auth/signin",
    "/login",
    "/token",
    "/api/auth/login",
    "/api/login",
]

SIGNUP_ENDPOINTS = [
    "/auth/signup",
    "/auth/register",
    "/signup",
    "/register",
    "/api/auth/signup",
    "/api/register",
]

TOKEN_KEYS = ("access_token", "token", "bearer_token", "auth_token", "jwt")
USER_ID_KEYS = ("user_id", "id")
DISPLAY_NAME_KEYS = ("display_name", "name")


class TokenAuthClient:
    """Finds a working login or signup endpoint and extracts a bearer token.

    Endpoints are tried in list order; the first one that answers with a
    token wins. Endpoints that fail or answer without a token are skipped.

    Args:
        base_url: Mock API root (defaults as for ``ResourceClient``).
        timeout: Per-request deadline in seconds.
        login_endpoints: Candidate login paths, in order.
        signup_endpoints: Candidate signup paths, in order.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        login_endpoints: list[str] | None = None,
        signup_endpoints: list[str] | None = None,
        transport=None,
    ):
        base_url = base_url or os.environ.get("MOCK_API_BASE_URL") or DEFAULT_MOCK_API_BASE_URL
        self.base_url = base_url.rstrip("/")
        self.login_endpoints = login_endpoints or list(LOGIN_ENDPOINTS)
        self.signup_endpoints = signup_endpoints or list(SIGNUP_ENDPOINTS)
        self._http = JsonHttp(timeout=timeout, transport=transport)

    def sign_in(self, email: str, password: str) -> AuthResult:
        return self._try_endpoints(
            self.login_endpoints, (200,), email, password,
            "No working authentication endpoint found",
        )

    def sign_up(self, email: str, password: str) -> AuthResult:
        return self._try_endpoints(
            self.signup_endpoints, (200, 201), email, password,
            "No working registration endpoint found",
        )

    async def asign_in(self, email: str, password: str) -> AuthResult:
        return await self._atry_endpoints(
            self.login_endpoints, (200,), email, password,
            "No working authentication endpoint found",
        )

    async def asign_up(self, email: str, password: str) -> AuthResult:
        return await self._atry_endpoints(
            self.signup_endpoints, (200, 201), email, password,
            "No working registration endpoint found",
        )

    def _try_endpoints(self, endpoints, accepted, email, password, exhausted) -> AuthResult:
        for endpoint in endpoints:
            try:
                response = self._http.request(
                    "POST", f"{self.base_url}{endpoint}",
                    payload={"email": email, "password": password},
                )
                session = _session_from_response(response, accepted, email)
            except InfinityClientError as e:
                logger.debug(f"Token auth via {endpoint} failed: {e}")
                continue
            if session is not None:
                logger.info(f"Token auth via {endpoint} succeeded (token {session.masked_token()})")
                return AuthResult(success=True, session=session)
        return AuthResult.from_error(AuthRejectedError(exhausted))

    async def _atry_endpoints(self, endpoints, accepted, email, password, exhausted) -> AuthResult:
        for endpoint in endpoints:
            try:
                response = await self._http.arequest(
                    "POST", f"{self.base_url}{endpoint}",
                    payload={"email": email, "password": password},
                )
                session = _session_from_response(response, accepted, email)
            except InfinityClientError as e:
                logger.debug(f"Token auth via {endpoint} failed: {e}")
                continue
            if session is not None:
                logger.info(f"Token auth via {endpoint} succeeded (token {session.masked_token()})")
                return AuthResult(success=True, session=session)
        return AuthResult.from_error(AuthRejectedError(exhausted))


def _session_from_response(
    response: httpx.Response, accepted: tuple[int, ...], email: str
) -> Session | None:
    """Session from an accepted response carrying a token, else None."""
    if response.status_code not in accepted:
        return None
    data = decode_json(response)
    if not isinstance(data, dict):
        return None
    token = first_present(data, TOKEN_KEYS)
    if token is None:
        return None

    user = data.get("user") if isinstance(data.get("user"), dict) else {}
    user_id = first_present(data, USER_ID_KEYS)
    if user_id is None:
        user_id = user.get("id")
    display_name = first_present(data, DISPLAY_NAME_KEYS) or user.get("name")

    return Session(
        token=str(token),
        user_id="" if user_id is None else str(user_id),
        email=email,
        display_name=display_name or default_display_name(email),
    )
