"""Immutable view of an HTTP response from the Helio API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx


@dataclass(frozen=True)
class HelioResponse:
    http_status: int
    http_headers: httpx.Headers
    http_body: str
    data: Any
    request_id: Optional[str] = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "HelioResponse":
        """Build from an httpx response; raises ``ValueError`` on a non-JSON body."""
        body = response.text
        data = json.loads(body)
        return cls(
            http_status=response.status_code,
            http_headers=response.headers,
            http_body=body,
            data=data,
            request_id=response.headers.get("Request-Id"),
        )


__all__ = ["HelioResponse"]
