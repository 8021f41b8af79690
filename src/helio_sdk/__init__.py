"""Helio Python SDK."""

from .api_resource import APIResource
from .client import HelioClient
from .config import AppInfo, ClientConfig, default_config
from .errors import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    ConfigurationError,
    HelioError,
    IdempotencyError,
    InvalidRequestError,
    ParticipantError,
    PermissionError,
    RateLimitError,
    SignatureVerificationError,
)
from .helio_object import HelioObject
from .list_object import ListObject
from .options import RequestOptions
from .resources import CustomerList, Participant
from .response import HelioResponse
from .result import Failure, Success
from .version import VERSION
from .webhook import Webhook, WebhookSignature

__all__ = [
    "APIConnectionError",
    "APIError",
    "APIResource",
    "AppInfo",
    "AuthenticationError",
    "ClientConfig",
    "ConfigurationError",
    "CustomerList",
    "Failure",
    "HelioClient",
    "HelioError",
    "HelioObject",
    "HelioResponse",
    "IdempotencyError",
    "InvalidRequestError",
    "ListObject",
    "Participant",
    "ParticipantError",
    "PermissionError",
    "RateLimitError",
    "RequestOptions",
    "SignatureVerificationError",
    "Success",
    "VERSION",
    "Webhook",
    "WebhookSignature",
    "default_config",
]
