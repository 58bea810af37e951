# oauth_clients/application/ports/inbound.py

from abc import ABC, abstractmethod
from typing import Dict

from oauth_clients.domain.models.client_domain_model import ClientRecord


class IClientManager(ABC):
    """Client manager use case interface."""

    @abstractmethod
    async def get_client(self, client_id: str) -> ClientRecord:
        """Get a client from the cache."""
        pass

    @abstractmethod
    async def authenticate(self, client_id: str, secret: str) -> ClientRecord:
        """Authenticate a client by ID and plaintext secret."""
        pass

    @abstractmethod
    async def create_client(self, record: ClientRecord) -> ClientRecord:
        """Hash the secret and persist a new client."""
        pass

    @abstractmethod
    async def delete_client(self, client_id: str) -> None:
        """Persist the removal of a client."""
        pass

    @abstractmethod
    async def get_clients(self) -> Dict[str, ClientRecord]:
        """Return a snapshot of every cached client."""
        pass
