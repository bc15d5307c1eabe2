"""Map identity provider error codes to user-facing messages."""

from __future__ import annotations

from infinity_clients.auth.models import AuthResult
from infinity_clients.exceptions import ErrorKind

# Checked in order; the first code contained in the provider message wins.
PROVIDER_MESSAGES = [
    ("INVALID_LOGIN_CREDENTIALS", "Invalid email or password. Please check your credentials."),
    ("EMAIL_EXISTS", "An account with this email already exists."),
    ("WEAK_PASSWORD", "Password should be at least 6 characters."),
    ("INVALID_EMAIL", "Please enter a valid email address."),
    ("USER_NOT_FOUND", "No account found with this email."),
    ("TOO_MANY_ATTEMPTS_TRY_LATER", "Too many failed attempts. Please try again later."),
    ("NETWORK_ERROR", "Network error. Please check your connection."),
    ("TIMEOUT", "Request timed out. Please try again."),
]

FALLBACK_MESSAGE = "An unexpected error occurred. Please try again."


def describe_auth_error(message: str | None) -> str:
    if not message:
        return FALLBACK_MESSAGE
    for code, text in PROVIDER_MESSAGES:
        if code in message:
            return text
    return FALLBACK_MESSAGE


def describe_result(result: AuthResult) -> str | None:
    """User-facing message for a failed result; None when it succeeded."""
    if result.success:
        return None
    if result.error_kind is ErrorKind.TIMEOUT:
        return describe_auth_error("TIMEOUT")
    if result.error_kind is ErrorKind.NETWORK_UNREACHABLE:
        return describe_auth_error("NETWORK_ERROR")
    return describe_auth_error(result.error)
