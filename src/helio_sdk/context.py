"""Per-request metadata used for log correlation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class RequestLogContext:
    method: str
    path: str
    api_id: Optional[str] = None
    api_token: Optional[str] = None
    api_version: Optional[str] = None
    idempotency_key: Optional[str] = None
    query_params: Optional[str] = None
    body: Any = None
    request_id: Optional[str] = None

    def from_response_headers(self, headers: Optional[Mapping[str, str]]) -> "RequestLogContext":
        """Return a copy updated with whatever the server echoed back.

        The server's view of the API id, version and idempotency key is more
        authoritative than what the request started with. The receiver is
        left untouched so a retry logs its own attempt correctly.
        """
        if headers is None:
            return self
        return replace(
            self,
            api_id=headers.get("X-API-ID") or self.api_id,
            api_version=headers.get("Helio-Version") or self.api_version,
            idempotency_key=headers.get("Idempotency-Key") or self.idempotency_key,
            request_id=headers.get("Request-Id") or self.request_id,
        )


__all__ = ["RequestLogContext"]
