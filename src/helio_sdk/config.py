"""Configuration objects for the Helio Python SDK."""

from __future__ import annotations

import logging
import os
import ssl
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import certifi

from .errors import ConfigurationError

DEFAULT_API_BASE = "https://helio.zurb.com/api/public"

LEVEL_DEBUG = "debug"
LEVEL_INFO = "info"
LEVEL_ERROR = "error"

LOG_LEVELS: Dict[str, int] = {
    LEVEL_DEBUG: logging.DEBUG,
    LEVEL_INFO: logging.INFO,
    LEVEL_ERROR: logging.ERROR,
}


def normalize_log_level(value: Union[str, int, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        for name, number in LOG_LEVELS.items():
            if number == value:
                return name
    elif isinstance(value, str) and value.lower() in LOG_LEVELS:
        return value.lower()
    raise ConfigurationError(
        f"log_level should only be set to None, {LEVEL_DEBUG!r}, {LEVEL_INFO!r} or {LEVEL_ERROR!r}; got {value!r}"
    )


@dataclass(frozen=True)
class AppInfo:
    """Identifies a plugin built on the SDK; echoed into the User-Agent."""

    name: str
    version: Optional[str] = None
    url: Optional[str] = None

    def format(self) -> str:
        text = self.name
        if self.version is not None:
            text = f"{text}/{self.version}"
        if self.url is not None:
            text = f"{text} ({self.url})"
        return text

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {"name": self.name, "version": self.version, "url": self.url}


@dataclass
class ClientConfig:
    """Settings read by every request a :class:`HelioClient` makes.

    The object is mutable so long-lived processes can rotate credentials, but
    changing it while requests are in flight on other threads is not
    supported: configure once, then share.

    Assigning ``ca_bundle_path`` drops the cached SSL context, which is
    rebuilt on the next request. That rebuild is not guarded by a lock; call
    :meth:`ssl_context` during start-up if many threads will issue their
    first request at the same time.
    """

    api_base: str = DEFAULT_API_BASE
    api_id: Optional[str] = None
    api_token: Optional[str] = None
    api_version: Optional[str] = None
    verify_ssl_certs: bool = True
    ca_bundle_path: str = field(default_factory=certifi.where)
    open_timeout: float = 30.0
    read_timeout: float = 80.0
    max_network_retries: int = 0
    initial_network_retry_delay: float = 0.5
    max_network_retry_delay: float = 2.0
    logger: Optional[logging.Logger] = None
    log_level: Optional[str] = None
    app_info: Optional[AppInfo] = None
    _ssl_context: Optional[ssl.SSLContext] = field(default=None, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "log_level":
            value = normalize_log_level(value)
        elif name == "max_network_retries":
            value = int(value)
            if value < 0:
                raise ConfigurationError("max_network_retries must be zero or greater")
        elif name == "ca_bundle_path":
            object.__setattr__(self, "_ssl_context", None)
        super().__setattr__(name, value)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        config = cls(
            api_id=os.environ.get("HELIO_API_ID"),
            api_token=os.environ.get("HELIO_API_TOKEN"),
            log_level=os.environ.get("HELIO_LOG") or None,
        )
        api_base = os.environ.get("HELIO_API_BASE")
        if api_base:
            config.api_base = api_base
        return config

    def set_app_info(self, name: str, *, version: Optional[str] = None, url: Optional[str] = None) -> None:
        self.app_info = AppInfo(name=name, version=version, url=url)

    def ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            object.__setattr__(self, "_ssl_context", ssl.create_default_context(cafile=self.ca_bundle_path))
        return self._ssl_context  # type: ignore[return-value]


default_config = ClientConfig.from_env()

__all__ = [
    "AppInfo",
    "ClientConfig",
    "DEFAULT_API_BASE",
    "LEVEL_DEBUG",
    "LEVEL_ERROR",
    "LEVEL_INFO",
    "LOG_LEVELS",
    "default_config",
    "normalize_log_level",
]
