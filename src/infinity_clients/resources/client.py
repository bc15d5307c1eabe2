"""Mock API resource client with sync and async interfaces."""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import quote

from infinity_clients.config import DEFAULT_MOCK_API_BASE_URL, DEFAULT_TIMEOUT
from infinity_clients.exceptions import (
    HttpStatusError,
    InfinityClientError,
    NotFoundError,
    ResponseDecodeError,
)
from infinity_clients.http import JsonHttp
from infinity_clients.resources.models import LookupResult, NormalizedResult
from infinity_clients.resources.normalizer import normalize

logger = logging.getLogger(__name__)

EMAIL_MESSAGES = "/db/email/messages"
CALENDAR_EVENTS = "/db/calendar/events"
ACCOUNTS = "/accounts"
INBOX = "/emails/inbox"


class ResourceClient:
    """Fetches email, calendar and account collections from the mock API.

    List endpoints return a ``NormalizedResult``; single-email lookups return
    a ``LookupResult``. Failures are returned, not raised.

    Args:
        base_url: Mock API root. Defaults to ``MOCK_API_BASE_URL`` from the
            environment, then the public mock server.
        timeout: Per-request deadline in seconds.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport=None,
    ):
        base_url = base_url or os.environ.get("MOCK_API_BASE_URL") or DEFAULT_MOCK_API_BASE_URL
        self.base_url = base_url.rstrip("/")
        self._http = JsonHttp(timeout=timeout, transport=transport)

    def _url(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_url}{endpoint}"

    # ---- Sync methods ----

    def fetch(self, endpoint: str, token: str | None = None) -> NormalizedResult:
        """GET a collection endpoint and normalize whatever shape comes back."""
        url = self._url(endpoint)
        try:
            data = self._http.get_json(url, token=token)
        except InfinityClientError as e:
            logger.warning(f"Failed to fetch {endpoint}: {e}")
            return NormalizedResult.from_error(e)
        result = normalize(data)
        logger.debug(f"Fetched {result.count} items from {endpoint} (shape={result.shape})")
        return result

    def get_email_messages(self, token: str | None = None) -> NormalizedResult:
        return self.fetch(EMAIL_MESSAGES, token=token)

    def get_calendar_events(self, token: str | None = None) -> NormalizedResult:
        return self.fetch(CALENDAR_EVENTS, token=token)

    def get_accounts(self, token: str | None = None) -> NormalizedResult:
        return self.fetch(ACCOUNTS, token=token)

    def get_inbox_messages(self, token: str | None = None) -> NormalizedResult:
        return self.fetch(INBOX, token=token)

    def get_email_by_string_id(self, email_id: str, token: str | None = None) -> LookupResult:
        """Look up an inbox-format email (HTML and clean bodies, attachments)."""
        return self._lookup(_email_path(email_id), email_id, "inbox", token)

    def get_email_by_int_id(self, email_id: int, token: str | None = None) -> LookupResult:
        """Look up a database-format email (full stored schema)."""
        return self._lookup(f"{EMAIL_MESSAGES}/{int(email_id)}", email_id, "database", token)

    def _lookup(self, endpoint: str, email_id: Any, format: str, token: str | None) -> LookupResult:
        try:
            data = self._http.get_json(self._url(endpoint), token=token)
            return _lookup_result(data, email_id, format)
        except InfinityClientError as e:
            return _lookup_failure(e, email_id, format)

    # ---- Async methods ----

    async def afetch(self, endpoint: str, token: str | None = None) -> NormalizedResult:
        """Async version of fetch."""
        url = self._url(endpoint)
        try:
            data = await self._http.aget_json(url, token=token)
        except InfinityClientError as e:
            logger.warning(f"Failed to fetch {endpoint}: {e}")
            return NormalizedResult.from_error(e)
        result = normalize(data)
        logger.debug(f"Fetched {result.count} items from {endpoint} (shape={result.shape})")
        return result

    async def aget_email_messages(self, token: str | None = None) -> NormalizedResult:
        return await self.afetch(EMAIL_MESSAGES, token=token)

    async def aget_calendar_events(self, token: str | None = None) -> NormalizedResult:
        return await self.afetch(CALENDAR_EVENTS, token=token)

    async def aget_accounts(self, token: str | None = None) -> NormalizedResult:
        return await self.afetch(ACCOUNTS, token=token)

    async def aget_inbox_messages(self, token: str | None = None) -> NormalizedResult:
        return await self.afetch(INBOX, token=token)

    async def aget_email_by_string_id(self, email_id: str, token: str | None = None) -> LookupResult:
        return await self._alookup(_email_path(email_id), email_id, "inbox", token)

    async def aget_email_by_int_id(self, email_id: int, token: str | None = None) -> LookupResult:
        return await self._alookup(f"{EMAIL_MESSAGES}/{int(email_id)}", email_id, "database", token)

    async def _alookup(self, endpoint: str, email_id: Any, format: str, token: str | None) -> LookupResult:
        try:
            data = await self._http.aget_json(self._url(endpoint), token=token)
            return _lookup_result(data, email_id, format)
        except InfinityClientError as e:
            return _lookup_failure(e, email_id, format)


def _email_path(email_id: Any) -> str:
    """Inbox email path with the ID escaped as a single path segment."""
    return f"/emails/{quote(str(email_id), safe='')}"


def _lookup_result(data: Any, email_id: Any, format: str) -> LookupResult:
    if not isinstance(data, dict):
        raise ResponseDecodeError(
            f"Expected a JSON object for email {email_id}, got {type(data).__name__}"
        )
    logger.debug(f"Fetched email {email_id} ({format}), keys: {list(data.keys())}")
    return LookupResult(success=True, data=data, format=format)


def _lookup_failure(exc: InfinityClientError, email_id: Any, format: str) -> LookupResult:
    if isinstance(exc, HttpStatusError) and exc.status_code == 404:
        exc = NotFoundError(f"Email not found with ID: {email_id}")
    else:
        logger.warning(f"Failed to fetch email {email_id}: {exc}")
    return LookupResult.from_error(exc, format=format)
