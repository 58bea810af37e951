# tests/conftest.py

import asyncio
from typing import Awaitable, Callable, List

import pytest

from oauth_clients.adapters.outbound.persistence.repositories.memory_client_store import InMemoryClientStore
from oauth_clients.adapters.outbound.security.id_generator import UUIDGenerator
from oauth_clients.adapters.outbound.security.secret_hasher import PasslibSecretHasher
from oauth_clients.application.services.client_synchronizer import ClientSynchronizer
from oauth_clients.application.services.credential_cache import CredentialCache
from oauth_clients.application.use_cases.client_use_cases import ClientManager
from oauth_clients.shared.utils.backoff import ExponentialBackoff


class RecordingBackoff(ExponentialBackoff):
    """Backoff that remembers every delay it handed out."""

    def __post_init__(self):
        super().__post_init__()
        self.delays: List[float] = []

    def next_delay(self) -> float:
        delay = super().next_delay()
        self.delays.append(delay)
        return delay


@pytest.fixture
def hasher():
    return PasslibSecretHasher(schemes=["bcrypt"], bcrypt_rounds=4)


@pytest.fixture
def store():
    return InMemoryClientStore()


@pytest.fixture
def cache():
    return CredentialCache()


@pytest.fixture
def backoff():
    return RecordingBackoff(min_delay=0.01, max_delay=0.05)


@pytest.fixture
async def synchronizer(store, cache, backoff):
    synchronizer = ClientSynchronizer(store, cache, backoff=backoff, shutdown_timeout=1.0)
    yield synchronizer
    await synchronizer.stop()


@pytest.fixture
def manager(store, hasher, cache, synchronizer):
    return ClientManager(
        store=store,
        hasher=hasher,
        id_generator=UUIDGenerator(),
        cache=cache,
        synchronizer=synchronizer,
    )


@pytest.fixture
def make_backoff():
    return RecordingBackoff


@pytest.fixture
def wait_until() -> Callable[..., Awaitable[None]]:
    """Poll a condition until it holds or fail after timeout seconds."""

    async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                pytest.fail("Condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait_until
