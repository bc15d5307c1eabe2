"""Unified exception hierarchy and error taxonomy for infinity-clients."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification carried by every failure result."""

    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    HTTP_ERROR = "http_error"
    DECODE_ERROR = "decode_error"
    NOT_FOUND = "not_found"
    AUTH_REJECTED = "auth_rejected"


class InfinityClientError(Exception):
    """Base exception for all infinity-client errors."""

    kind: ErrorKind | None = None

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(InfinityClientError):
    """Missing or invalid client configuration."""


# Transport / response
class RequestError(InfinityClientError):
    """Base exception for a single outbound request."""


class RequestTimeoutError(RequestError):
    """Request exceeded the fixed deadline."""

    kind = ErrorKind.TIMEOUT


class NetworkUnreachableError(RequestError):
    """Transport-level failure (DNS, connection refused, bad URL)."""

    kind = ErrorKind.NETWORK_UNREACHABLE


class HttpStatusError(RequestError):
    """Server answered with an unexpected HTTP status."""

    kind = ErrorKind.HTTP_ERROR


class NotFoundError(HttpStatusError):
    """HTTP 404 on a single-item lookup."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "", status_code: int | None = 404):
        super().__init__(message, status_code)


class ResponseDecodeError(RequestError):
    """Response body was not valid JSON or lacked required fields."""

    kind = ErrorKind.DECODE_ERROR


# Auth
class AuthError(InfinityClientError):
    """Base exception for authentication operations."""


class AuthRejectedError(AuthError):
    """Identity provider returned a structured error payload."""

    kind = ErrorKind.AUTH_REJECTED
