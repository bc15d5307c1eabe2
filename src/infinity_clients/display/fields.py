"""Map raw API items to display-ready records.

Backends disagree on field names (``sender`` vs ``from``, ``date`` vs
``timestamp``), so each logical field lists its alias keys in order and the
first key present with a non-null value wins. All alias tables live in this
module. Mapping is pure: same input, same output.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

PLACEHOLDER = "N/A"
ELLIPSIS = "..."
SNIPPET_LENGTH = 200
BODY_LENGTH = 500

_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


@dataclass(frozen=True)
class FieldSpec:
    """One logical display field and where to find it in a raw item."""

    name: str
    aliases: tuple[str, ...]
    placeholder: str = PLACEHOLDER
    max_length: int | None = None
    kind: str = "text"  # "text" | "timestamp" | "html"


EMAIL_FIELDS = (
    FieldSpec("id", ("id",)),
    FieldSpec("subject", ("subject", "title"), placeholder="No Subject"),
    FieldSpec("sender", ("sender", "from"), placeholder="Unknown Sender"),
    FieldSpec("recipient", ("recipient", "to")),
    FieldSpec("date", ("date", "timestamp", "received_at"), kind="timestamp"),
    FieldSpec("snippet", ("snippet", "body"), max_length=SNIPPET_LENGTH),
    FieldSpec("user_id", ("user_id",)),
)

EVENT_FIELDS = (
    FieldSpec("id", ("id",)),
    FieldSpec("title", ("title", "name"), placeholder="No Title"),
    FieldSpec("date", ("date", "start_date")),
    FieldSpec("time", ("time", "start_time")),
    FieldSpec("description", ("description", "details"), max_length=SNIPPET_LENGTH),
)

ACCOUNT_FIELDS = (
    FieldSpec(
        "email",
        ("gmail_address", "email", "name", "account", "emailAddress", "address", "user"),
        placeholder="Unknown Account",
    ),
    FieldSpec("display_name", ("displayName", "fullName", "name", "username")),
    FieldSpec("id", ("id", "accountId", "userId", "user_id", "localId")),
    FieldSpec("status", ("status", "state", "active", "verified")),
    FieldSpec("created_at", ("created_at",)),
)

EMAIL_DETAIL_FIELDS = (
    FieldSpec("subject", ("subject",), placeholder="No Subject"),
    FieldSpec("sender", ("sender", "from"), placeholder="Unknown Sender"),
    FieldSpec("recipient", ("recipient", "to")),
    FieldSpec("thread_id", ("threadId", "thread_id")),
    FieldSpec("html_body", ("htmlBody", "html_body"), max_length=BODY_LENGTH, kind="html"),
    FieldSpec("clean_body", ("cleanBody", "text_body"), max_length=BODY_LENGTH),
    FieldSpec("user_id", ("user_id",)),
    FieldSpec("gmail_id", ("gmail_id",)),
    FieldSpec("created_at", ("created_at",), kind="timestamp"),
    FieldSpec("updated_at", ("updated_at",), kind="timestamp"),
    FieldSpec("raw_headers", ("raw_headers",), max_length=BODY_LENGTH),
)

ATTACHMENT_FIELDS = (
    FieldSpec("id", ("id",)),
    FieldSpec("filename", ("filename", "name")),
    FieldSpec("content_type", ("contentType", "content_type", "mimeType")),
    FieldSpec("size", ("size",)),
)


def first_present(item: Any, aliases: Iterable[str]) -> Any:
    """Value of the first alias key present with a non-null value, else None."""
    if not isinstance(item, dict):
        return None
    for key in aliases:
        value = item.get(key)
        if value is not None:
            return value
    return None


def truncate(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    """Cut ``text`` to ``limit`` characters and append ``marker`` if it was longer."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}{marker}"


def _six_digit_fraction(value: str) -> str:
    # fromisoformat before 3.11 only accepts 3 or 6 fractional digits
    return _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", value, count=1)


def format_timestamp(value: Any, placeholder: str = PLACEHOLDER) -> str:
    """Render an ISO-8601 string as ``d/m/yyyy H:MM``; other values as text."""
    if value is None:
        return placeholder
    if not isinstance(value, str):
        return _to_text(value)
    try:
        parsed = datetime.fromisoformat(_six_digit_fraction(value.replace("Z", "+00:00")))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return f"{parsed.day}/{parsed.month}/{parsed.year} {parsed.hour}:{parsed.minute:02d}"


def resolve_field(item: Any, spec: FieldSpec) -> str:
    value = first_present(item, spec.aliases)
    if value is None:
        return spec.placeholder

    if spec.kind == "timestamp":
        text = format_timestamp(value, spec.placeholder)
    elif spec.kind == "html":
        from infinity_clients.display.html import html_to_text

        text = html_to_text(_to_text(value))
    else:
        text = _to_text(value)

    if spec.max_length is not None:
        text = truncate(text, spec.max_length)
    return text


def map_item(item: Any, fields: Iterable[FieldSpec]) -> dict[str, str]:
    """Map one raw item to ``{field name: display text}``."""
    return {spec.name: resolve_field(item, spec) for spec in fields}


def map_items(
    items: Iterable[Any], fields: Iterable[FieldSpec], limit: int | None = None
) -> list[dict[str, str]]:
    """Map a list of raw items, optionally only the first ``limit``."""
    fields = tuple(fields)
    items = list(items)
    if limit is not None:
        items = items[:limit]
    return [map_item(item, fields) for item in items]


def map_email(item: Any) -> dict[str, str]:
    return map_item(item, EMAIL_FIELDS)


def map_event(item: Any) -> dict[str, str]:
    return map_item(item, EVENT_FIELDS)


def map_account(item: Any) -> dict[str, Any]:
    """Account record plus avatar initial, scope count and Gmail flag."""
    record: dict[str, Any] = map_item(item, ACCOUNT_FIELDS)
    email = record["email"]
    scopes = item.get("scopes") if isinstance(item, dict) else None

    record["initial"] = email[0].upper() if email else "A"
    record["scope_count"] = len(scopes) if isinstance(scopes, list) else None
    record["is_gmail"] = "@gmail.com" in email
    return record


def map_email_detail(item: Any) -> dict[str, Any]:
    """Full single-email record, with attachments mapped when present."""
    record: dict[str, Any] = map_item(item, EMAIL_DETAIL_FIELDS)
    attachments = item.get("attachments") if isinstance(item, dict) else None
    record["attachments"] = (
        map_items(attachments, ATTACHMENT_FIELDS) if isinstance(attachments, list) else []
    )
    return record


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)
