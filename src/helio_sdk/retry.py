"""Retry eligibility and backoff for network failures."""

from __future__ import annotations

import random
import ssl
from dataclasses import dataclass, field
from typing import Callable

import httpx

from .config import ClientConfig

# Conflicts are answered when a concurrent request holds the same
# idempotency key; the second attempt sees the settled result.
RETRYABLE_STATUS_CODES = (409,)


def is_tls_error(exc: BaseException) -> bool:
    current: BaseException | None = exc
    while current is not None:
        if isinstance(current, ssl.SSLError):
            return True
        current = current.__cause__ or current.__context__
    return False


@dataclass(frozen=True)
class RetryPolicy:
    max_network_retries: int = 0
    initial_delay: float = 0.5
    max_delay: float = 2.0
    rand: Callable[[], float] = field(default=random.random, compare=False)

    @classmethod
    def from_config(cls, config: ClientConfig, rand: Callable[[], float] = random.random) -> "RetryPolicy":
        return cls(
            max_network_retries=config.max_network_retries,
            initial_delay=config.initial_network_retry_delay,
            max_delay=config.max_network_retry_delay,
            rand=rand,
        )

    def should_retry(self, exc: Exception, num_retries: int) -> bool:
        if num_retries >= self.max_network_retries:
            return False
        # Timeouts while opening the connection or reading the response.
        if isinstance(exc, httpx.TimeoutException):
            return True
        # Refused or reset connections are often a single saturated host.
        # A failed TLS handshake will fail the same way again.
        if isinstance(exc, httpx.NetworkError):
            return not is_tls_error(exc)
        if isinstance(exc, httpx.HTTPStatusError):
            return exc.response.status_code in RETRYABLE_STATUS_CODES
        return False

    def sleep_time(self, num_retries: int) -> float:
        """Seconds to wait before retry number ``num_retries`` (1-based)."""
        sleep_seconds = min(self.initial_delay * (2 ** (num_retries - 1)), self.max_delay)
        # Jitter into [sleep_seconds / 2, sleep_seconds].
        sleep_seconds *= 0.5 * (1 + self.rand())
        return max(self.initial_delay, sleep_seconds)


__all__ = ["RETRYABLE_STATUS_CODES", "RetryPolicy", "is_tls_error"]
