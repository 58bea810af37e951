# oauth_clients/adapters/outbound/persistence/repositories/__init__.py

"""
Client store implementations.
"""

from oauth_clients.adapters.outbound.persistence.repositories.change_feed import PostgresChangeFeed
from oauth_clients.adapters.outbound.persistence.repositories.client_repository import SQLAlchemyClientStore
from oauth_clients.adapters.outbound.persistence.repositories.memory_client_store import (
    InMemoryClientStore,
    MemoryChangeFeed,
)

__all__ = [
    "PostgresChangeFeed",
    "SQLAlchemyClientStore",
    "InMemoryClientStore",
    "MemoryChangeFeed",
]
