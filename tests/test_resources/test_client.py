"""Tests for the mock API resource client."""

import time

import httpx
import pytest

from infinity_clients.exceptions import ErrorKind
from infinity_clients.resources.client import ResourceClient

BASE = "https://api.test"


def make_client(transport_for, routes):
    return ResourceClient(base_url=BASE, transport=transport_for(routes))


def test_base_url_from_environment(clean_env):
    clean_env.setenv("MOCK_API_BASE_URL", "https://env.test/")
    assert ResourceClient().base_url == "https://env.test"


def test_fetch_email_messages_list(transport_for):
    emails = [{"id": 1, "sender": "a@x.com", "subject": "Hi"}]
    client = make_client(transport_for, {"/db/email/messages": (200, emails)})
    result = client.get_email_messages()
    assert result.success is True
    assert result.count == 1
    assert result.items == emails
    assert result.raw == emails


def test_fetch_calendar_events_items_wrapper(transport_for):
    body = {"items": [{"id": 1, "title": "Standup"}], "total": 1}
    client = make_client(transport_for, {"/db/calendar/events": (200, body)})
    result = client.get_calendar_events()
    assert result.items == [{"id": 1, "title": "Standup"}]
    assert result.count == 1
    assert result.raw == body


def test_fetch_accounts_single_object(transport_for):
    account = {"id": "acc-1", "email": "me@gmail.com"}
    client = make_client(transport_for, {"/accounts": (200, account)})
    result = client.get_accounts()
    assert result.items == [account]
    assert result.count == 1


def test_fetch_inbox(transport_for):
    client = make_client(transport_for, {"/emails/inbox": (200, {"results": [{"id": "a"}, {"id": "b"}]})})
    assert client.get_inbox_messages().count == 2


def test_fetch_sends_bearer_token(transport_for, seen_requests):
    client = make_client(transport_for, {"/accounts": (200, [])})
    client.get_accounts(token="tok-1")
    assert seen_requests[0].headers["Authorization"] == "Bearer tok-1"
    assert seen_requests[0].headers["Accept"] == "application/json"


def test_fetch_without_token_has_no_auth_header(transport_for, seen_requests):
    client = make_client(transport_for, {"/accounts": (200, [])})
    client.get_accounts()
    assert "Authorization" not in seen_requests[0].headers


def test_fetch_accepts_path_without_slash(transport_for):
    client = make_client(transport_for, {"/accounts": (200, [1])})
    assert client.fetch("accounts").count == 1


def test_fetch_http_error(transport_for):
    client = make_client(transport_for, {"/db/email/messages": (503, {"detail": "down"})})
    result = client.get_email_messages()
    assert result.success is False
    assert result.error_kind is ErrorKind.HTTP_ERROR
    assert result.status_code == 503
    assert result.items == []
    assert result.count == 0
    assert "503" in result.error


def test_fetch_list_404_is_http_error(transport_for):
    client = make_client(transport_for, {})
    result = client.get_accounts()
    assert result.error_kind is ErrorKind.HTTP_ERROR
    assert result.status_code == 404


def test_fetch_malformed_json(transport_for):
    client = make_client(transport_for, {"/db/email/messages": (200, "{not json")})
    result = client.get_email_messages()
    assert result.success is False
    assert result.error_kind is ErrorKind.DECODE_ERROR
    assert result.raw is None


def test_fetch_timeout(transport_for):
    client = make_client(transport_for, {"/accounts": httpx.ReadTimeout("slow")})
    result = client.get_accounts()
    assert result.success is False
    assert result.error_kind is ErrorKind.TIMEOUT


def test_fetch_network_unreachable(transport_for):
    client = make_client(transport_for, {"/accounts": httpx.ConnectError("refused")})
    result = client.get_accounts()
    assert result.error_kind is ErrorKind.NETWORK_UNREACHABLE


def test_lookup_by_int_id(transport_for, seen_requests):
    email = {"id": 5, "subject": "Stored", "raw_headers": "X-A: 1"}
    client = make_client(transport_for, {"/db/email/messages/5": (200, email)})
    result = client.get_email_by_int_id(5)
    assert result.success is True
    assert result.data == email
    assert result.format == "database"
    assert seen_requests[0].url.path == "/db/email/messages/5"


def test_lookup_by_string_id(transport_for):
    email = {"id": "abc", "htmlBody": "<p>Hi</p>", "attachments": []}
    client = make_client(transport_for, {"/emails/abc": (200, email)})
    result = client.get_email_by_string_id("abc")
    assert result.success is True
    assert result.format == "inbox"


def test_lookup_404_is_not_found(transport_for):
    client = make_client(transport_for, {})
    result = client.get_email_by_int_id(999)
    assert result.success is False
    assert result.not_found is True
    assert result.error_kind is ErrorKind.NOT_FOUND
    assert result.error == "Email not found with ID: 999"
    assert result.data is None


def test_lookup_server_error_is_http_error(transport_for):
    client = make_client(transport_for, {"/emails/abc": (500, {"detail": "boom"})})
    result = client.get_email_by_string_id("abc")
    assert result.error_kind is ErrorKind.HTTP_ERROR
    assert result.not_found is False


def test_lookup_non_object_is_decode_error(transport_for):
    client = make_client(transport_for, {"/emails/abc": (200, [1, 2])})
    result = client.get_email_by_string_id("abc")
    assert result.error_kind is ErrorKind.DECODE_ERROR


@pytest.mark.asyncio
async def test_afetch_data_wrapper(transport_for):
    client = make_client(transport_for, {"/db/calendar/events": (200, {"data": [{"id": 1}, {"id": 2}]})})
    result = await client.aget_calendar_events()
    assert result.count == 2
    assert result.shape == "data"


@pytest.mark.asyncio
async def test_afetch_failure(transport_for):
    client = make_client(transport_for, {"/accounts": httpx.ConnectError("refused")})
    result = await client.aget_accounts()
    assert result.success is False
    assert result.error_kind is ErrorKind.NETWORK_UNREACHABLE


@pytest.mark.asyncio
async def test_alookup_not_found(transport_for):
    client = make_client(transport_for, {})
    result = await client.aget_email_by_string_id("missing")
    assert result.not_found is True
    assert result.format == "inbox"


def test_string_id_is_one_path_segment(transport_for, seen_requests):
    client = make_client(transport_for, {"/emails/abc": (200, {"id": "abc", "subject": "other email"})})
    result = client.get_email_by_string_id("abc#1")
    assert seen_requests[0].url.raw_path == b"/emails/abc%231"
    assert result.success is False
    assert result.not_found is True
    assert result.error == "Email not found with ID: abc#1"


def test_string_id_with_slash_and_query(transport_for, seen_requests):
    client = make_client(transport_for, {})
    client.get_email_by_string_id("a/b?c=d")
    assert seen_requests[0].url.raw_path == b"/emails/a%2Fb%3Fc%3Dd"
    assert seen_requests[0].url.params == httpx.QueryParams()


def test_fetch_corrupt_encoding_is_decode_error():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200, content=b"not gzip", headers={"Content-Encoding": "gzip"}
        )
    )
    client = ResourceClient(base_url=BASE, transport=transport)
    result = client.get_accounts()
    assert result.success is False
    assert result.error_kind is ErrorKind.DECODE_ERROR


def test_fetch_slow_body_times_out():
    def drip():
        yield b'[{"id": 1},'
        time.sleep(0.2)
        yield b'{"id": 2},'
        time.sleep(0.2)
        yield b'{"id": 3}]'

    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=drip()))
    client = ResourceClient(base_url=BASE, timeout=0.25, transport=transport)
    result = client.get_accounts()
    assert result.success is False
    assert result.error_kind is ErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_alookup_string_id_is_escaped(transport_for, seen_requests):
    client = make_client(transport_for, {"/emails/abc": (200, {"id": "abc"})})
    result = await client.aget_email_by_string_id("abc#1")
    assert seen_requests[0].url.raw_path == b"/emails/abc%231"
    assert result.not_found is True
