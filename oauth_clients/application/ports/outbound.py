# oauth_clients/application/ports/outbound.py

from abc import ABC, abstractmethod
from typing import List

from oauth_clients.domain.models.client_domain_model import ClientRecord
from oauth_clients.domain.models.change_event import ChangeEvent


class IChangeFeed(ABC):
    """
    Open change subscription.

    Iterates ChangeEvents until the feed fails or is closed. A failure in
    the underlying connection surfaces as DatabaseOperationException from
    __anext__.
    """

    def __aiter__(self) -> "IChangeFeed":
        return self

    @abstractmethod
    async def __anext__(self) -> ChangeEvent:
        """Wait for the next change event."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the subscription."""
        pass

    async def __aenter__(self) -> "IChangeFeed":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class IClientStore(ABC):
    """Client store interface."""

    @abstractmethod
    async def insert(self, record: ClientRecord) -> None:
        """Persist a new client."""
        pass

    @abstractmethod
    async def delete(self, client_id: str) -> None:
        """Remove a client by ID."""
        pass

    @abstractmethod
    async def scan_all(self) -> List[ClientRecord]:
        """Return every stored client."""
        pass

    @abstractmethod
    async def subscribe_changes(self) -> IChangeFeed:
        """Open a continuous change subscription."""
        pass


class ISecretHasher(ABC):
    """Secret hashing interface."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Hash a plaintext secret."""
        pass

    @abstractmethod
    async def compare(self, hashed: str, candidate: str) -> None:
        """Raise InvalidCredentialsException unless candidate matches hashed."""
        pass


class IIdGenerator(ABC):
    """Identifier generation interface."""

    @abstractmethod
    def new_id(self) -> str:
        """Return a new collision-resistant identifier."""
        pass
