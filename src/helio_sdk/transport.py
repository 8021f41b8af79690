"""Thread-scoped httpx clients used to reach the Helio API."""

from __future__ import annotations

import threading
import weakref
from typing import Any, Optional

import httpx

from .config import ClientConfig
from .log import warn

VERIFY_DISABLED_WARNING = (
    "WARNING: Running without SSL cert verification. You should never do this in production. "
    "Set verify_ssl_certs=True on the client configuration to enable verification."
)

_verify_warning_lock = threading.Lock()
_verify_warned = False


def _warn_verification_disabled(config: ClientConfig) -> None:
    global _verify_warned
    with _verify_warning_lock:
        if _verify_warned:
            return
        _verify_warned = True
    warn(config, VERIFY_DISABLED_WARNING)


class _ThreadClient:
    __slots__ = ("client", "__weakref__")

    def __init__(self, client: httpx.Client) -> None:
        self.client = client


class HttpTransport:
    """Sends requests over one pooled ``httpx.Client`` per thread.

    Clients keep their connections alive between calls; scoping them to a
    thread keeps two workers from sharing a socket. A thread's client is
    closed once the thread is gone.
    """

    def __init__(self, config: ClientConfig, *, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        self._transport = transport
        self._local = threading.local()
        self._clients: "weakref.WeakSet[httpx.Client]" = weakref.WeakSet()
        self._lock = threading.Lock()

    def _verify(self) -> Any:
        if self._config.verify_ssl_certs:
            return self._config.ssl_context()
        _warn_verification_disabled(self._config)
        return False

    def _client(self) -> httpx.Client:
        holder = getattr(self._local, "holder", None)
        if holder is None:
            if self._transport is not None:
                client = httpx.Client(transport=self._transport)
            else:
                client = httpx.Client(verify=self._verify())
            holder = _ThreadClient(client)
            weakref.finalize(holder, client.close)
            self._local.holder = holder
            with self._lock:
                self._clients.add(client)
        return holder.client

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self._config.read_timeout, connect=self._config.open_timeout)

    def send(self, method: str, url: str, *, headers: Any, content: Any = None, files: Any = None) -> httpx.Response:
        return self._client().request(
            method.upper(),
            url,
            headers=headers,
            content=content,
            files=files,
            timeout=self.timeout(),
        )

    def close(self) -> None:
        with self._lock:
            clients = list(self._clients)
            self._clients = weakref.WeakSet()
        for client in clients:
            client.close()
        self._local = threading.local()


__all__ = ["HttpTransport", "VERIFY_DISABLED_WARNING"]
