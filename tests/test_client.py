from __future__ import annotations

import io
import json
import logging
from typing import List, Optional
from urllib.parse import parse_qsl

import httpx
import pytest

from helio_sdk.client import HelioClient
from helio_sdk.config import ClientConfig
from helio_sdk.errors import APIConnectionError, APIError, AuthenticationError
from helio_sdk.result import Failure, Success


def ok(request: httpx.Request, payload: Optional[dict] = None, **headers: str) -> httpx.Response:
    return httpx.Response(200, json=payload or {"id": "cl_1", "object": "customer_list"}, headers=headers)


def test_get_params_go_into_query_string(make_client) -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return ok(request)

    client = make_client(handler)
    client.request("get", "/customer_lists", {"limit": 3, "filter": {"name": "vip"}, "tags": ["a", "b"]})

    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "api.example.com"
    assert request.url.path == "/customer_lists"
    assert request.url.params["limit"] == "3"
    assert request.url.params["filter[name]"] == "vip"
    assert request.url.params.get_list("tags[]") == ["a", "b"]
    assert request.content == b""


def test_post_form_encodes_body_and_sets_headers(make_client, config: ClientConfig) -> None:
    config.api_version = "2020-01-01"
    config.set_app_info("MyPlugin", version="1.2", url="https://example.com")
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return ok(request)

    client = make_client(handler)
    client.request("post", "/participants", {"participant": {"email": "a@b.co"}, "active": True})

    request = seen[0]
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer tok_123"
    assert request.headers["X-API-ID"] == "app_123"
    assert request.headers["X-API-TOKEN"] == "tok_123"
    assert request.headers["Helio-Version"] == "2020-01-01"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.headers["User-Agent"].startswith("Helio/v1 PythonBindings/")
    assert request.headers["User-Agent"].endswith("MyPlugin/1.2 (https://example.com)")
    profile = json.loads(request.headers["X-Helio-Client-User-Agent"])
    assert profile["lang"] == "python"
    assert profile["application"]["name"] == "MyPlugin"
    assert "Idempotency-Key" not in request.headers

    body = parse_qsl(request.content.decode())
    assert ("participant[email]", "a@b.co") in body
    assert ("active", "true") in body


def test_missing_token_fails_without_network(make_client, config: ClientConfig) -> None:
    config.api_token = None
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return ok(request)

    client = make_client(handler)
    with pytest.raises(AuthenticationError, match="No API key provided"):
        client.request("get", "/customer_lists")

    result = client.execute("post", "/customer_lists", {"name": "x"})
    assert isinstance(result, Failure)
    assert isinstance(result.error, AuthenticationError)
    assert calls["count"] == 0


def test_token_with_whitespace_is_rejected(make_client) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return ok(request)

    client = make_client(handler)
    with pytest.raises(AuthenticationError, match="whitespace"):
        client.request("get", "/customer_lists", opts={"api_token": "tok 123"})
    assert calls["count"] == 0


def test_per_call_options_override_config(make_client) -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return ok(request)

    client = make_client(handler)
    _, opts = client.request(
        "get",
        "/customer_lists",
        opts={
            "api_base": "https://other.example.com",
            "api_id": "app_other",
            "api_token": "tok_other",
            "headers": {"Helio-Version": "2021-06-01"},
        },
    )

    request = seen[0]
    assert request.url.host == "other.example.com"
    assert request.headers["Authorization"] == "Bearer tok_other"
    assert request.headers["X-API-ID"] == "app_other"
    assert request.headers["Helio-Version"] == "2021-06-01"
    assert opts.api_token == "tok_other"
    assert opts.headers == {}


def test_idempotency_key_is_reused_across_retries(make_client, config: ClientConfig, sleeps: List[float]) -> None:
    config.max_network_retries = 2
    keys: List[Optional[str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers.get("Idempotency-Key"))
        if len(keys) < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return ok(request)

    client = make_client(handler)
    client.request("post", "/customer_lists", {"name": "vip"})

    assert len(keys) == 3
    assert keys[0] is not None
    assert keys[0] == keys[1] == keys[2]
    assert len(sleeps) == 2


def test_caller_supplied_idempotency_key_wins(make_client, config: ClientConfig) -> None:
    config.max_network_retries = 1
    keys: List[Optional[str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers.get("Idempotency-Key"))
        return ok(request)

    client = make_client(handler)
    client.request("delete", "/customer_lists/cl_1", opts={"headers": {"idempotency_key": "my-key"}})
    assert keys == ["my-key"]


def test_no_retries_when_disabled(make_client, sleeps: List[float]) -> None:
    keys: List[Optional[str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers.get("Idempotency-Key"))
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(APIConnectionError) as excinfo:
        client.request("post", "/customer_lists", {"name": "vip"})

    assert keys == [None]
    assert sleeps == []
    assert "DNS" in str(excinfo.value)
    assert "retried" not in str(excinfo.value)


@pytest.mark.parametrize("max_retries,failures,expected_calls", [(3, 1, 2), (1, 3, 2), (2, 2, 3), (0, 1, 1)])
def test_retry_count_is_bounded_by_config(
    make_client, config: ClientConfig, max_retries: int, failures: int, expected_calls: int
) -> None:
    config.max_network_retries = max_retries
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] <= failures:
            raise httpx.ConnectError("connection reset", request=request)
        return ok(request)

    client = make_client(handler)
    result = client.execute("get", "/customer_lists")

    assert calls["count"] == expected_calls
    assert result.ok is (failures <= max_retries)


def test_exhausted_retries_report_retry_count(make_client, config: ClientConfig) -> None:
    config.max_network_retries = 2

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(handler)
    with pytest.raises(APIConnectionError) as excinfo:
        client.request("get", "/customer_lists")

    message = str(excinfo.value)
    assert "Could not connect to Helio (https://api.example.com)" in message
    assert "Request was retried 2 times." in message
    assert "(Network error: timed out)" in message


def test_conflict_is_retried(make_client, config: ClientConfig) -> None:
    config.max_network_retries = 1
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(409, json={"error": {"type": "invalid_request_error", "message": "busy"}})
        return ok(request)

    client = make_client(handler)
    resp, _ = client.request("post", "/customer_lists", {"name": "vip"})
    assert resp.http_status == 200
    assert calls["count"] == 2


def test_server_errors_are_not_retried(make_client, config: ClientConfig) -> None:
    config.max_network_retries = 3
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(500, json={"error": {"type": "api_error", "message": "boom"}})

    client = make_client(handler)
    with pytest.raises(APIError, match="boom"):
        client.request("get", "/customer_lists")
    assert calls["count"] == 1


def test_malformed_success_body_becomes_api_error(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    client = make_client(handler)
    result = client.execute("get", "/customer_lists")
    assert isinstance(result, Failure)
    assert isinstance(result.error, APIError)
    assert "Invalid response object from API" in result.error.message
    assert result.error.http_status == 200


def test_execute_returns_response_and_refreshed_context(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return ok(request, {"id": "cl_1"}, **{"Request-Id": "req_42", "Helio-Version": "2022-01-01"})

    client = make_client(handler)
    result = client.execute("get", "/customer_lists/cl_1", {"expand": ["participant"]})

    assert isinstance(result, Success)
    assert result.response.data == {"id": "cl_1"}
    assert result.response.request_id == "req_42"
    assert result.context.request_id == "req_42"
    assert result.context.api_version == "2022-01-01"
    assert result.context.query_params == "expand[]=participant"
    assert client.last_response is result.response


def test_multipart_upload(make_client) -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return ok(request)

    client = make_client(handler)
    client.request(
        "post",
        "/imports",
        {"purpose": "participants", "file": io.BytesIO(b"email\nx@example.com\n")},
        opts={"headers": {"Content-Type": "multipart/form-data"}},
    )

    request = seen[0]
    assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert b'name="purpose"' in request.content
    assert b"participants" in request.content
    assert b"x@example.com" in request.content


def test_requests_are_logged_to_configured_logger(make_client, config: ClientConfig, caplog) -> None:
    config.logger = logging.getLogger("tests.helio")
    caplog.set_level(logging.DEBUG, logger="tests.helio")

    def handler(request: httpx.Request) -> httpx.Response:
        return ok(request, **{"Request-Id": "req_1"})

    client = make_client(handler)
    client.request("get", "/customer_lists")

    events = [json.loads(record.getMessage()) for record in caplog.records if record.name == "tests.helio"]
    messages = [event["message"] for event in events]
    assert messages == ["Request to Helio API", "Request details", "Response from Helio API", "Response details"]
    response_event = events[2]
    assert response_event["status"] == 200
    assert response_event["request_id"] == "req_1"
    assert response_event["method"] == "get"
    assert "tok_123" not in caplog.text


def test_client_is_usable_as_context_manager(config: ClientConfig) -> None:
    transport = httpx.MockTransport(lambda request: ok(request))
    with HelioClient(config, transport=transport) as client:
        resp, _ = client.request("get", "/customer_lists")
    assert resp.data["object"] == "customer_list"


def test_unencodable_app_info_falls_back_to_raw_profile(make_client, config: ClientConfig) -> None:
    config.set_app_info("MyPlugin", version=object())
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return ok(request)

    client = make_client(handler)
    client.request("get", "/customer_lists")

    headers = seen[0].headers
    assert "X-Helio-Client-User-Agent" not in headers
    assert "'lang': 'python'" in headers["X-Helio-Client-Raw-User-Agent"]
    assert headers["X-Helio-Client-User-Agent-Error"].endswith("(TypeError)")
