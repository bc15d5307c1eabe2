"""Result models for the mock API resource client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from infinity_clients.exceptions import ErrorKind, InfinityClientError


@dataclass
class NormalizedResult:
    """Uniform ``(items, count)`` view of a list endpoint response.

    On success ``count == len(items)`` and ``raw`` keeps the decoded JSON as
    received. On failure ``items`` is empty and ``error``/``error_kind`` are set.
    """

    success: bool
    items: list[Any] = field(default_factory=list)
    count: int = 0
    error: str | None = None
    error_kind: ErrorKind | None = None
    status_code: int | None = None
    shape: str | None = None  # "list" | "data" | "items" | "results" | "object"
    raw: Any = None

    @classmethod
    def from_error(cls, exc: InfinityClientError) -> NormalizedResult:
        return cls(
            success=False,
            error=str(exc),
            error_kind=exc.kind,
            status_code=exc.status_code,
        )


@dataclass
class LookupResult:
    """Single-object lookup outcome."""

    success: bool
    data: dict | None = None
    format: str = ""  # "inbox" | "database"
    error: str | None = None
    error_kind: ErrorKind | None = None
    status_code: int | None = None

    @classmethod
    def from_error(cls, exc: InfinityClientError, format: str = "") -> LookupResult:
        return cls(
            success=False,
            format=format,
            error=str(exc),
            error_kind=exc.kind,
            status_code=exc.status_code,
        )

    @property
    def not_found(self) -> bool:
        return self.error_kind is ErrorKind.NOT_FOUND
