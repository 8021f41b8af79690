from __future__ import annotations

import httpx
import pytest

from helio_sdk.errors import (
    APIError,
    AuthenticationError,
    HelioError,
    IdempotencyError,
    InvalidRequestError,
    ParticipantError,
    PermissionError,
    RateLimitError,
)


def error_client(make_client, status: int, error: object, **headers: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": error}, headers=headers)

    return make_client(handler)


def raised(client) -> HelioError:
    result = client.execute("post", "/customer_lists", {"name": "vip"})
    assert not result.ok
    return result.error


@pytest.mark.parametrize("status", [400, 404])
def test_idempotency_errors(make_client, status: int) -> None:
    client = error_client(make_client, status, {"type": "idempotency_error", "message": "Key reused", "param": "name"})
    error = raised(client)
    assert type(error) is IdempotencyError
    assert error.message == "Key reused"


@pytest.mark.parametrize("status", [400, 404])
@pytest.mark.parametrize("error_type", ["invalid_request_error", "not_found", None])
def test_invalid_request_errors_carry_param(make_client, status: int, error_type) -> None:
    client = error_client(make_client, status, {"type": error_type, "message": "Missing name", "param": "name"})
    error = raised(client)
    assert isinstance(error, InvalidRequestError)
    assert error.param == "name"
    assert error.http_status == status


@pytest.mark.parametrize(
    "status,expected",
    [(401, AuthenticationError), (403, PermissionError), (429, RateLimitError)],
)
def test_status_specific_errors(make_client, status: int, expected: type) -> None:
    client = error_client(make_client, status, {"type": "whatever", "message": "nope", "param": "ignored"})
    error = raised(client)
    assert type(error) is expected
    assert not hasattr(error, "param")


def test_participant_error_copies_param_and_code(make_client) -> None:
    client = error_client(
        make_client,
        402,
        {"type": "participant_error", "message": "Email bounced", "param": "email", "code": "email_invalid"},
        **{"Request-Id": "req_9"},
    )
    error = raised(client)
    assert isinstance(error, ParticipantError)
    assert error.param == "email"
    assert error.code == "email_invalid"
    assert error.request_id == "req_9"
    assert str(error) == "(Status 402) (Request req_9) Email bounced"


@pytest.mark.parametrize("status", [409, 418, 500, 503])
def test_other_statuses_are_api_errors(make_client, status: int) -> None:
    client = error_client(make_client, status, {"type": "api_error", "message": "Server fell over"})
    error = raised(client)
    assert type(error) is APIError
    assert error.http_status == status


def test_errors_keep_the_response(make_client) -> None:
    client = error_client(make_client, 400, {"message": "Bad", "param": "limit"}, **{"Request-Id": "req_3"})
    error = raised(client)
    assert error.json_body == {"error": {"message": "Bad", "param": "limit"}}
    assert '"param":"limit"' in error.http_body.replace(" ", "")
    assert error.http_headers["request-id"] == "req_3"
    assert error.response is not None
    assert error.response.http_status == 400
    assert error.response.request_id == "req_3"


@pytest.mark.parametrize("body", [{"message": "no error key"}, {"error": "just a string"}, ["a", "list"]])
def test_missing_error_object_is_indeterminate(make_client, body: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=body)

    error = raised(make_client(handler))
    assert type(error) is APIError
    assert error.message == "Indeterminate error"
    assert error.http_status == 400


def test_unparseable_error_body(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    error = raised(make_client(handler))
    assert type(error) is APIError
    assert error.message.startswith("Invalid response object from API: 'Bad Gateway'")
    assert error.http_status == 502


def test_request_raises_classified_error(make_client) -> None:
    client = error_client(make_client, 401, {"type": "authentication_error", "message": "Bad token"})
    with pytest.raises(AuthenticationError, match="Bad token"):
        client.request("get", "/customer_lists")


def test_unusual_field_types_keep_the_status_mapping(make_client) -> None:
    client = error_client(
        make_client, 400, {"type": "invalid_request_error", "message": "Bad", "param": ["email", "name"]}
    )
    error = raised(client)
    assert type(error) is InvalidRequestError
    assert error.param == ["email", "name"]

    client = error_client(make_client, 401, {"type": 401, "message": "Bad token"})
    error = raised(client)
    assert type(error) is AuthenticationError
    assert error.message == "Bad token"
