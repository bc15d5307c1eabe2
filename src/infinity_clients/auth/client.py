"""Identity Toolkit REST client for email/password auth, sync and async."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from infinity_clients.auth.models import AuthResult, Session, default_display_name
from infinity_clients.config import DEFAULT_IDENTITY_BASE_URL, DEFAULT_TIMEOUT
from infinity_clients.exceptions import (
    AuthRejectedError,
    ConfigurationError,
    HttpStatusError,
    InfinityClientError,
    ResponseDecodeError,
)
from infinity_clients.http import JsonHttp, decode_json

logger = logging.getLogger(__name__)

SIGN_IN = "signInWithPassword"
SIGN_UP = "signUp"
SEND_OOB_CODE = "sendOobCode"


class AuthClient:
    """Email/password sign-in, sign-up and password reset.

    Every call is independent: no token refresh, no retry, nothing persisted.
    The returned ``Session`` belongs to the caller.

    Args:
        api_key: Web API key. Falls back to ``FIREBASE_API_KEY``.
        base_url: Identity Toolkit root.
        timeout: Per-request deadline in seconds.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_IDENTITY_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport=None,
    ):
        api_key = api_key or os.environ.get("FIREBASE_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "Firebase API key is required. "
                "Pass it directly or set FIREBASE_API_KEY in your environment."
            )
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = JsonHttp(timeout=timeout, transport=transport)

    def _url(self, action: str) -> str:
        return f"{self.base_url}/accounts:{action}"

    def _post(self, action: str, payload: dict) -> httpx.Response:
        response = self._http.request(
            "POST", self._url(action), payload=payload, params={"key": self.api_key}
        )
        _raise_for_error(response)
        return response

    async def _apost(self, action: str, payload: dict) -> httpx.Response:
        response = await self._http.arequest(
            "POST", self._url(action), payload=payload, params={"key": self.api_key}
        )
        _raise_for_error(response)
        return response

    # ---- Sync methods ----

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""
        return self._credentials_call(SIGN_IN, email, password)

    def sign_up(self, email: str, password: str) -> AuthResult:
        """Create an account with email and password."""
        return self._credentials_call(SIGN_UP, email, password)

    def reset_password(self, email: str) -> AuthResult:
        """Send a password reset email. Success carries no session."""
        try:
            self._post(SEND_OOB_CODE, _reset_payload(email))
        except InfinityClientError as e:
            logger.warning(f"Password reset failed for {email}: {e}")
            return AuthResult.from_error(e)
        logger.info(f"Password reset email sent to {email}")
        return AuthResult(success=True)

    def _credentials_call(self, action: str, email: str, password: str) -> AuthResult:
        try:
            data = _json_object(self._post(action, _credentials_payload(email, password)))
            session = _session_from(data, email)
        except InfinityClientError as e:
            logger.warning(f"{action} failed for {email}: {e}")
            return AuthResult.from_error(e)
        logger.info(f"{action} succeeded for {session.email} (token {session.masked_token()})")
        return AuthResult(success=True, session=session)

    # ---- Async methods ----

    async def asign_in(self, email: str, password: str) -> AuthResult:
        """Async version of sign_in."""
        return await self._acredentials_call(SIGN_IN, email, password)

    async def asign_up(self, email: str, password: str) -> AuthResult:
        """Async version of sign_up."""
        return await self._acredentials_call(SIGN_UP, email, password)

    async def areset_password(self, email: str) -> AuthResult:
        """Async version of reset_password."""
        try:
            await self._apost(SEND_OOB_CODE, _reset_payload(email))
        except InfinityClientError as e:
            logger.warning(f"Password reset failed for {email}: {e}")
            return AuthResult.from_error(e)
        logger.info(f"Password reset email sent to {email}")
        return AuthResult(success=True)

    async def _acredentials_call(self, action: str, email: str, password: str) -> AuthResult:
        try:
            data = _json_object(await self._apost(action, _credentials_payload(email, password)))
            session = _session_from(data, email)
        except InfinityClientError as e:
            logger.warning(f"{action} failed for {email}: {e}")
            return AuthResult.from_error(e)
        logger.info(f"{action} succeeded for {session.email} (token {session.masked_token()})")
        return AuthResult(success=True, session=session)


def _credentials_payload(email: str, password: str) -> dict:
    return {"email": email, "password": password, "returnSecureToken": True}


def _reset_payload(email: str) -> dict:
    return {"email": email, "requestType": "PASSWORD_RESET"}


def _raise_for_error(response: httpx.Response) -> None:
    """Raise the matching error for any non-200 identity API response."""
    if response.status_code == 200:
        return
    message = _provider_error_message(response)
    if message:
        raise AuthRejectedError(message, status_code=response.status_code)
    raise HttpStatusError(
        f"Identity API request failed: HTTP {response.status_code}",
        status_code=response.status_code,
    )


def _json_object(response: httpx.Response) -> dict:
    data = decode_json(response)
    if not isinstance(data, dict):
        raise ResponseDecodeError(
            f"Expected a JSON object from identity API, got {type(data).__name__}",
            status_code=response.status_code,
        )
    return data


def _provider_error_message(response: httpx.Response) -> str | None:
    """Pull ``error.message`` out of an error body, if the body has one."""
    try:
        body: Any = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


def _session_from(data: dict, email: str) -> Session:
    token = data.get("idToken")
    if not token:
        raise ResponseDecodeError("Identity API response is missing idToken", status_code=200)
    return Session(
        token=token,
        user_id=str(data.get("localId") or ""),
        email=data.get("email") or email,
        display_name=data.get("displayName") or default_display_name(email),
    )
