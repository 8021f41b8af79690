from __future__ import annotations

from typing import Callable, Iterator, List

import httpx
import pytest

from helio_sdk.client import HelioClient
from helio_sdk.config import ClientConfig

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(
        api_base="https://api.example.com",
        api_id="app_123",
        api_token="tok_123",
        initial_network_retry_delay=0,
        max_network_retry_delay=0,
    )


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def make_client(config: ClientConfig, sleeps: List[float]) -> Iterator[Callable[[Handler], HelioClient]]:
    clients: List[HelioClient] = []

    def factory(handler: Handler) -> HelioClient:
        client = HelioClient(config, transport=httpx.MockTransport(handler), sleep=sleeps.append)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
