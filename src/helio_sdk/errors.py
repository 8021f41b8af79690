"""Exception hierarchy raised by the Helio SDK."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class ConfigurationError(ValueError):
    """Raised when a client setting is given an unsupported value."""


class HelioError(Exception):
    """Base class for every error returned by the Helio API or this SDK.

    ``response`` holds the :class:`~helio_sdk.response.HelioResponse` that
    conveyed the error, when there was one. The ``http_*`` attributes mirror
    its fields for convenience.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        http_status: Optional[int] = None,
        http_body: Optional[str] = None,
        json_body: Any = None,
        http_headers: Optional[Mapping[str, str]] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.http_body = http_body
        self.json_body = json_body
        self.http_headers = http_headers if http_headers is not None else {}
        self.request_id = request_id or self.http_headers.get("Request-Id")
        self.response = None

    def __str__(self) -> str:
        status = "" if self.http_status is None else f"(Status {self.http_status}) "
        request = "" if self.request_id is None else f"(Request {self.request_id}) "
        return f"{status}{request}{self.message or ''}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"http_status={self.http_status!r}, request_id={self.request_id!r})"
        )


class AuthenticationError(HelioError):
    """Invalid or missing credentials."""


class APIConnectionError(HelioError):
    """The SDK could not talk to the API: DNS, refused connection, TLS, timeout."""


class APIError(HelioError):
    """Catch-all for server-side anomalies and errors this SDK does not know."""


class ParticipantError(HelioError):
    """A 402 failure the caller can act on; ``param`` and ``code`` say how."""

    def __init__(self, message: Optional[str], param: Optional[str], code: Optional[str], **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.param = param
        self.code = code


class IdempotencyError(HelioError):
    """An idempotency key was reused with different parameters."""


class InvalidRequestError(HelioError):
    def __init__(self, message: Optional[str], param: Optional[str], **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.param = param


class PermissionError(HelioError):  # noqa: A001
    """The credentials are valid but not allowed to touch the resource."""


class RateLimitError(HelioError):
    """Too many requests; back off before trying again."""


class SignatureVerificationError(HelioError):
    """A webhook payload did not match its signature header."""

    def __init__(self, message: Optional[str], sig_header: Optional[str], http_body: Optional[str] = None) -> None:
        super().__init__(message, http_body=http_body)
        self.sig_header = sig_header


__all__ = [
    "APIConnectionError",
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "HelioError",
    "IdempotencyError",
    "InvalidRequestError",
    "ParticipantError",
    "PermissionError",
    "RateLimitError",
    "SignatureVerificationError",
]
