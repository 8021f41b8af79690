"""Maps failed responses and transport errors onto the SDK error taxonomy."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .config import ClientConfig
from .context import RequestLogContext
from .errors import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    HelioError,
    IdempotencyError,
    InvalidRequestError,
    ParticipantError,
    PermissionError,
    RateLimitError,
)
from .log import log_error
from .response import HelioResponse
from .retry import is_tls_error


class ErrorPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Any = None
    message: Any = None
    param: Any = None
    code: Any = None


def general_api_error(status: Optional[int], body: Optional[str], headers: Any = None) -> APIError:
    return APIError(
        f"Invalid response object from API: {body!r} (HTTP response code was {status})",
        http_status=status,
        http_body=body,
        http_headers=headers,
    )


def specific_api_error(resp: HelioResponse, error: ErrorPayload) -> HelioError:
    opts: Dict[str, Any] = {
        "http_body": resp.http_body,
        "http_headers": resp.http_headers,
        "http_status": resp.http_status,
        "json_body": resp.data,
        "request_id": resp.request_id,
    }
    status = resp.http_status
    if status in (400, 404):
        if error.type == "idempotency_error":
            return IdempotencyError(error.message, **opts)
        return InvalidRequestError(error.message, error.param, **opts)
    if status == 401:
        return AuthenticationError(error.message, **opts)
    if status == 402:
        return ParticipantError(error.message, error.param, error.code, **opts)
    if status == 403:
        return PermissionError(error.message, **opts)
    if status == 429:
        return RateLimitError(error.message, **opts)
    return APIError(error.message, **opts)


def classify_error_response(
    config: ClientConfig, response: httpx.Response, context: RequestLogContext
) -> HelioError:
    """Turn a non-2xx response into the matching typed error."""
    try:
        resp = HelioResponse.from_httpx(response)
    except ValueError:
        error = general_api_error(response.status_code, response.text, response.headers)
        log_error(
            config,
            "Helio API error",
            status=response.status_code,
            error_message=error.message,
            idempotency_key=context.idempotency_key,
            request_id=context.request_id,
        )
        return error

    error_data = resp.data.get("error") if isinstance(resp.data, dict) else None
    try:
        payload = ErrorPayload.model_validate(error_data)
    except ValidationError:
        payload = None

    if payload is None:
        error = APIError(
            "Indeterminate error",
            http_status=resp.http_status,
            http_body=resp.http_body,
            json_body=resp.data,
            http_headers=resp.http_headers,
            request_id=resp.request_id,
        )
    else:
        error = specific_api_error(resp, payload)
    error.response = resp

    log_error(
        config,
        "Helio API error",
        status=resp.http_status,
        error_code=payload.code if payload else None,
        error_message=payload.message if payload else error.message,
        error_param=payload.param if payload else None,
        error_type=payload.type if payload else None,
        idempotency_key=context.idempotency_key,
        request_id=context.request_id,
    )
    return error


def network_error(
    config: ClientConfig,
    exc: httpx.RequestError,
    context: RequestLogContext,
    num_retries: int,
    api_base: str,
) -> APIConnectionError:
    log_error(
        config,
        "Helio network error",
        error_message=str(exc),
        idempotency_key=context.idempotency_key,
        request_id=context.request_id,
    )

    if is_tls_error(exc):
        message = (
            "Could not establish a secure connection to Helio, you may need to upgrade your "
            "OpenSSL version or point ca_bundle_path at a valid certificate bundle."
        )
    elif isinstance(exc, httpx.TimeoutException):
        message = (
            f"Could not connect to Helio ({api_base}). Please check your internet connection "
            "and try again. If this problem persists, let us know at helio@zurb.com."
        )
    elif isinstance(exc, httpx.ConnectError):
        message = (
            "Unexpected error communicating when trying to connect to Helio. You may be seeing "
            "this message because your DNS is not working. To check, try running "
            "'host helio.zurb.com' from the command line."
        )
    else:
        message = (
            "Unexpected error communicating with Helio. If this problem persists, "
            "let us know at helio@zurb.com."
        )

    if num_retries > 0:
        message += f" Request was retried {num_retries} times."

    return APIConnectionError(f"{message}\n\n(Network error: {exc})")


__all__ = [
    "ErrorPayload",
    "classify_error_response",
    "general_api_error",
    "network_error",
    "specific_api_error",
]
