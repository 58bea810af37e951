# oauth_clients/application/use_cases/client_use_cases.py

"""
Facade for client management.

This module implements the manager used by the authorization server to
look up and authenticate clients from the cache, and to register or remove
clients in the store. Writes never touch the cache: they become visible
once the synchronizer applies the matching change event.
"""

import dataclasses
import logging
from typing import Dict, Optional

from oauth_clients.application.ports.inbound import IClientManager
from oauth_clients.application.ports.outbound import IClientStore, IIdGenerator, ISecretHasher
from oauth_clients.application.services.client_synchronizer import ClientSynchronizer
from oauth_clients.application.services.credential_cache import CredentialCache
from oauth_clients.domain.exceptions import (
    ResourceNotFoundException,
    InvalidCredentialsException,
    HashingException,
    DatabaseOperationException,
)
from oauth_clients.domain.models.client_domain_model import ClientRecord

logger = logging.getLogger(__name__)


class ClientManager(IClientManager):
    """
    Client manager composing the cache, the synchronizer and the collaborators.

    Reads are served from the cache only. Create and delete go synchronously
    to the store.
    """

    def __init__(
            self,
            store: IClientStore,
            hasher: ISecretHasher,
            id_generator: IIdGenerator,
            cache: Optional[CredentialCache] = None,
            synchronizer: Optional[ClientSynchronizer] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.id_generator = id_generator
        self.cache = cache or CredentialCache()
        self.synchronizer = synchronizer or ClientSynchronizer(store, self.cache)

    @property
    def is_ready(self) -> bool:
        return self.synchronizer.is_ready

    async def start(self) -> int:
        """
        Load the cache from the store, then launch the watch loop.

        Returns:
            Number of clients loaded by the cold start

        Raises:
            DatabaseOperationException: If the cold start fails
        """
        count = await self.synchronizer.cold_start()
        self.synchronizer.start()
        return count

    async def stop(self) -> None:
        await self.synchronizer.stop()

    async def get_client(self, client_id: str) -> ClientRecord:
        try:
            return await self.cache.get(client_id)
        except ResourceNotFoundException:
            logger.warning(f"Client not found: ID {client_id}")
            raise

    async def authenticate(self, client_id: str, secret: str) -> ClientRecord:
        """
        Authenticate a client against its cached hashed secret.

        The cache lookup is atomic; the hash comparison runs after the lock
        is released.

        Args:
            client_id: Client identifier
            secret: Plain text secret

        Returns:
            Authenticated client

        Raises:
            ResourceNotFoundException: If the client is not cached
            InvalidCredentialsException: If the secret does not match
        """
        record = await self.get_client(client_id)

        try:
            await self.hasher.compare(record.secret, secret)
        except InvalidCredentialsException:
            logger.warning(f"Authentication attempt with incorrect secret: {client_id}")
            raise

        return record

    async def create_client(self, record: ClientRecord) -> ClientRecord:
        """
        Register a new client in the store.

        An ID is generated when the record has none, and the plaintext
        secret is replaced with its hash before anything is persisted.

        Args:
            record: Client with a plaintext secret

        Returns:
            The record as persisted, with ID and hashed secret

        Raises:
            HashingException: If the secret cannot be hashed
            DatabaseOperationException: If the store rejects the insert
        """
        client_id = record.id or self.id_generator.new_id()

        try:
            hashed_secret = await self.hasher.hash(record.secret)
        except HashingException:
            logger.error(f"Error hashing secret for client {client_id}")
            raise

        persisted = dataclasses.replace(record, id=client_id, secret=hashed_secret)

        try:
            await self.store.insert(persisted)
        except DatabaseOperationException as e:
            logger.error(f"Error creating client {client_id}: {e}")
            raise

        logger.info(f"Client created: {client_id}")
        return persisted

    async def delete_client(self, client_id: str) -> None:
        """
        Remove a client from the store.

        Raises:
            DatabaseOperationException: If the store rejects the delete
        """
        try:
            await self.store.delete(client_id)
        except DatabaseOperationException as e:
            logger.error(f"Error deleting client {client_id}: {e}")
            raise

        logger.info(f"Client deleted: {client_id}")

    async def get_clients(self) -> Dict[str, ClientRecord]:
        return await self.cache.get_all()
