# oauth_clients/main.py

"""
Lifecycle of the client credential cache.

Builds the manager and its collaborators from the settings, runs the cold
start, launches the watch loop and tears everything down on exit.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from oauth_clients.adapters.configuration.config import Settings, settings as default_settings
from oauth_clients.adapters.outbound.persistence.database import create_engine
from oauth_clients.adapters.outbound.persistence.repositories.client_repository import SQLAlchemyClientStore
from oauth_clients.adapters.outbound.security.id_generator import UUIDGenerator
from oauth_clients.adapters.outbound.security.secret_hasher import PasslibSecretHasher
from oauth_clients.application.ports.outbound import IClientStore, IIdGenerator, ISecretHasher
from oauth_clients.application.services.client_synchronizer import ClientSynchronizer
from oauth_clients.application.services.credential_cache import CredentialCache
from oauth_clients.application.use_cases.client_use_cases import ClientManager
from oauth_clients.shared.utils.backoff import ExponentialBackoff

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Single logging configuration for the process."""
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def build_client_manager(
        settings: Settings,
        store: IClientStore,
        hasher: Optional[ISecretHasher] = None,
        id_generator: Optional[IIdGenerator] = None,
) -> ClientManager:
    """
    Wire a ClientManager with its cache and synchronizer.

    Collaborators that are not given are built from the settings.
    """
    cache = CredentialCache()
    synchronizer = ClientSynchronizer(
        store,
        cache,
        backoff=ExponentialBackoff(
            min_delay=settings.WATCH_RETRY_MIN_SECONDS,
            max_delay=settings.WATCH_RETRY_MAX_SECONDS,
        ),
        shutdown_timeout=settings.WATCH_SHUTDOWN_TIMEOUT_SECONDS,
    )
    return ClientManager(
        store=store,
        hasher=hasher or PasslibSecretHasher(
            schemes=settings.HASH_SCHEMES,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        ),
        id_generator=id_generator or UUIDGenerator(),
        cache=cache,
        synchronizer=synchronizer,
    )


@asynccontextmanager
async def client_manager_lifespan(
        settings: Optional[Settings] = None,
        store: Optional[IClientStore] = None,
        hasher: Optional[ISecretHasher] = None,
        id_generator: Optional[IIdGenerator] = None,
) -> AsyncIterator[ClientManager]:
    """
    Async context manager handling startup and shutdown of the cache.

    On entry the cache is loaded from the store and the watch loop started.
    A cold start failure propagates and nothing is yielded. On exit the
    watch loop is stopped and the engine created here, if any, is disposed.

    Example:
        ```python
        async with client_manager_lifespan() as manager:
            client = await manager.authenticate(client_id, secret)
        ```
    """
    settings = settings or default_settings
    engine = None
    if store is None:
        engine = create_engine(settings)
        store = SQLAlchemyClientStore(engine, channel=settings.CLIENT_CHANGES_CHANNEL)

    manager = build_client_manager(settings, store, hasher=hasher, id_generator=id_generator)

    # Startup
    logger.info("Client cache starting up...")
    try:
        count = await manager.start()
        logger.info(f"Client cache ready with {count} clients")

        yield manager

    finally:
        # Shutdown
        logger.info("Client cache shutting down...")
        await manager.stop()
        if engine is not None:
            await engine.dispose()
