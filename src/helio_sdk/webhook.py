"""Verification of signed webhook payloads sent by Helio."""

from __future__ import annotations

import hmac
import json
import time
from hashlib import sha256
from typing import TYPE_CHECKING, Any, List, Optional, Union

from .errors import SignatureVerificationError
from .options import OptionsLike
from .util import convert_to_helio_object

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient

DEFAULT_TOLERANCE = 300
EXPECTED_SCHEME = "v1"

Payload = Union[str, bytes]


def _text(payload: Payload) -> str:
    return payload.decode("utf-8") if isinstance(payload, bytes) else payload


class WebhookSignature:
    @staticmethod
    def compute_signature(payload: str, secret: str) -> str:
        return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), sha256).hexdigest()

    @staticmethod
    def _parse_header(header: str) -> tuple[Optional[int], List[str]]:
        timestamp: Optional[int] = None
        signatures: List[str] = []
        for item in header.split(","):
            key, _, value = item.strip().partition("=")
            if key == "t":
                try:
                    timestamp = int(value)
                except ValueError:
                    timestamp = None
            elif key == EXPECTED_SCHEME and value:
                signatures.append(value)
        return timestamp, signatures

    @classmethod
    def verify_header(
        cls,
        payload: Payload,
        header: str,
        secret: str,
        tolerance: Optional[int] = DEFAULT_TOLERANCE,
        now: Optional[float] = None,
    ) -> bool:
        """Check ``header`` against ``payload``; raise on any mismatch."""
        payload = _text(payload)
        timestamp, signatures = cls._parse_header(header or "")
        if timestamp is None:
            raise SignatureVerificationError(
                "Unable to extract timestamp and signatures from header", header, http_body=payload
            )
        if not signatures:
            raise SignatureVerificationError(
                f"No signatures found with expected scheme {EXPECTED_SCHEME}", header, http_body=payload
            )

        expected = cls.compute_signature(f"{timestamp}.{payload}", secret)
        if not any(hmac.compare_digest(expected, signature) for signature in signatures):
            raise SignatureVerificationError(
                "No signatures found matching the expected signature for payload", header, http_body=payload
            )

        current = time.time() if now is None else now
        if tolerance and timestamp < current - tolerance:
            raise SignatureVerificationError(
                f"Timestamp outside the tolerance zone ({timestamp})", header, http_body=payload
            )
        return True


class Webhook:
    @staticmethod
    def construct_event(
        payload: Payload,
        sig_header: str,
        secret: str,
        tolerance: Optional[int] = DEFAULT_TOLERANCE,
        opts: OptionsLike = None,
        *,
        client: Optional["HelioClient"] = None,
    ) -> Any:
        """Verify the signature, then decode the event into SDK objects."""
        WebhookSignature.verify_header(payload, sig_header, secret, tolerance)
        data = json.loads(_text(payload))
        return convert_to_helio_object(data, opts, client=client)


__all__ = ["DEFAULT_TOLERANCE", "Webhook", "WebhookSignature"]
