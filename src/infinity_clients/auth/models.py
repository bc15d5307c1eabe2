"""Data models for the auth module."""

from __future__ import annotations

from dataclasses import dataclass

from infinity_clients.exceptions import ErrorKind, InfinityClientError
from infinity_clients.http import build_headers

TOKEN_PREVIEW_LENGTH = 20


@dataclass(frozen=True)
class Session:
    """An authenticated identity. Held in memory by the caller, never persisted."""

    token: str
    user_id: str
    email: str
    display_name: str = ""

    def authorization_headers(self) -> dict[str, str]:
        return build_headers(self.token)

    def masked_token(self) -> str:
        """Token prefix safe for logs and status displays."""
        return f"{self.token[:TOKEN_PREVIEW_LENGTH]}..."


@dataclass
class AuthResult:
    """Outcome of a sign-in, sign-up or password reset call."""

    success: bool
    session: Session | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    status_code: int | None = None

    @classmethod
    def from_error(cls, exc: InfinityClientError) -> AuthResult:
        return cls(
            success=False,
            error=str(exc),
            error_kind=exc.kind,
            status_code=exc.status_code,
        )


def default_display_name(email: str) -> str:
    return email.split("@")[0]
