# oauth_clients/application/services/credential_cache.py

"""
In-memory cache of client records.

Every operation, read or write, holds the same asyncio.Lock for its whole
duration. The cache is filled by the cold start and mutated afterwards only
by ClientSynchronizer: a full replace after every new change subscription
and the reconciliation of each change event.
"""

import asyncio
import logging
from typing import Dict, Iterable

from oauth_clients.domain.exceptions import ResourceNotFoundException
from oauth_clients.domain.models.change_event import ChangeEvent
from oauth_clients.domain.models.client_domain_model import ClientRecord

logger = logging.getLogger(__name__)


class CredentialCache:
    """
    Mapping from client ID to client record guarded by one exclusive lock.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._clients: Dict[str, ClientRecord] = {}

    async def get(self, client_id: str) -> ClientRecord:
        """
        Find a cached client.

        Raises:
            ResourceNotFoundException: If the ID is not cached
        """
        async with self._lock:
            record = self._clients.get(client_id)
        if record is None:
            raise ResourceNotFoundException(
                detail="Client not found",
                resource_id=client_id
            )
        return record

    async def get_all(self) -> Dict[str, ClientRecord]:
        """Return a snapshot copy of the whole mapping."""
        async with self._lock:
            return dict(self._clients)

    async def set(self, client_id: str, record: ClientRecord) -> None:
        async with self._lock:
            self._clients[client_id] = record

    async def delete(self, client_id: str) -> None:
        async with self._lock:
            self._clients.pop(client_id, None)

    async def clear(self) -> None:
        async with self._lock:
            self._clients.clear()

    async def load(self, records: Iterable[ClientRecord]) -> int:
        """
        Insert a batch of records under a single lock acquisition.

        Returns:
            Number of records inserted
        """
        count = 0
        async with self._lock:
            for record in records:
                self._clients[record.id] = record
                count += 1
        return count

    async def replace(self, records: Iterable[ClientRecord]) -> int:
        """
        Swap the whole mapping for records in one critical section.

        Readers see either the previous contents or the new ones, never an
        empty or partial cache.

        Returns:
            Number of records now cached
        """
        clients = {record.id: record for record in records}
        async with self._lock:
            self._clients = clients
        return len(clients)

    async def size(self) -> int:
        async with self._lock:
            return len(self._clients)

    async def apply(self, event: ChangeEvent) -> None:
        """
        Reconcile one change event into the cache.

        Deletes drop the old ID, updates drop the old ID and store the new
        record under its own ID, inserts store the new record. The whole
        sequence runs inside one critical section.
        """
        if event.is_empty:
            logger.warning("Ignoring change event without old or new value")
            return

        async with self._lock:
            if event.old_value is not None:
                self._clients.pop(event.old_value.id, None)
            if event.new_value is not None:
                self._clients[event.new_value.id] = event.new_value
