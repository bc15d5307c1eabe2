"""Tests for exception hierarchy."""

from infinity_clients.exceptions import (
    AuthError,
    AuthRejectedError,
    ConfigurationError,
    ErrorKind,
    HttpStatusError,
    InfinityClientError,
    NetworkUnreachableError,
    NotFoundError,
    RequestError,
    RequestTimeoutError,
    ResponseDecodeError,
)


def test_all_inherit_from_base():
    for exc_class in [
        ConfigurationError,
        RequestError, RequestTimeoutError, NetworkUnreachableError,
        HttpStatusError, NotFoundError, ResponseDecodeError,
        AuthError, AuthRejectedError,
    ]:
        assert issubclass(exc_class, InfinityClientError)


def test_request_hierarchy():
    assert issubclass(RequestTimeoutError, RequestError)
    assert issubclass(NetworkUnreachableError, RequestError)
    assert issubclass(ResponseDecodeError, RequestError)
    assert issubclass(NotFoundError, HttpStatusError)


def test_auth_hierarchy():
    assert issubclass(AuthRejectedError, AuthError)
    assert not issubclass(AuthRejectedError, RequestError)


def test_kinds():
    assert RequestTimeoutError().kind is ErrorKind.TIMEOUT
    assert NetworkUnreachableError().kind is ErrorKind.NETWORK_UNREACHABLE
    assert HttpStatusError().kind is ErrorKind.HTTP_ERROR
    assert NotFoundError().kind is ErrorKind.NOT_FOUND
    assert ResponseDecodeError().kind is ErrorKind.DECODE_ERROR
    assert AuthRejectedError().kind is ErrorKind.AUTH_REJECTED
    assert ConfigurationError().kind is None


def test_not_found_defaults_to_404():
    assert NotFoundError("missing").status_code == 404


def test_exception_message():
    e = HttpStatusError("boom", status_code=503)
    assert str(e) == "boom"
    assert e.status_code == 503
