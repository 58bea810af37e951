# oauth_clients/adapters/outbound/persistence/repositories/memory_client_store.py

"""
In-process client store.

Keeps clients in a dict and fans a ChangeEvent out to every open feed on
each mutation, the same contract the PostgreSQL store offers through
LISTEN/NOTIFY. Useful for embedding and tests.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Set

from oauth_clients.application.ports.outbound import IChangeFeed, IClientStore
from oauth_clients.domain.exceptions import ResourceAlreadyExistsException
from oauth_clients.domain.models.change_event import ChangeEvent
from oauth_clients.domain.models.client_domain_model import ClientRecord

logger = logging.getLogger(__name__)

_CLOSED = object()


class MemoryChangeFeed(IChangeFeed):
    """Feed backed by an asyncio.Queue filled by InMemoryClientStore."""

    def __init__(self, store: "InMemoryClientStore"):
        self._store = store
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def publish(self, event: ChangeEvent) -> None:
        self._queue.put_nowait(event)

    async def __anext__(self) -> ChangeEvent:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)
        self._store.unsubscribe(self)


class InMemoryClientStore(IClientStore):
    """
    Dict-backed client store with a change subscription.
    """

    def __init__(self, records: Optional[Iterable[ClientRecord]] = None):
        self._records: Dict[str, ClientRecord] = {record.id: record for record in records or ()}
        self._feeds: Set[MemoryChangeFeed] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._feeds)

    async def insert(self, record: ClientRecord) -> None:
        """
        Raises:
            ResourceAlreadyExistsException: If the ID is already stored
        """
        if record.id in self._records:
            raise ResourceAlreadyExistsException(resource_id=record.id)
        self._records[record.id] = record
        self._publish(ChangeEvent(old_value=None, new_value=record))

    async def update(self, old_id: str, record: ClientRecord) -> None:
        """
        Replace the client stored under old_id, possibly under a new ID.
        """
        old = self._records.pop(old_id, None)
        self._records[record.id] = record
        self._publish(ChangeEvent(old_value=old, new_value=record))

    async def delete(self, client_id: str) -> None:
        old = self._records.pop(client_id, None)
        if old is None:
            logger.debug(f"Delete of unknown client '{client_id}' ignored")
            return
        self._publish(ChangeEvent(old_value=old, new_value=None))

    async def scan_all(self) -> List[ClientRecord]:
        return list(self._records.values())

    async def subscribe_changes(self) -> MemoryChangeFeed:
        feed = MemoryChangeFeed(self)
        self._feeds.add(feed)
        return feed

    def unsubscribe(self, feed: MemoryChangeFeed) -> None:
        self._feeds.discard(feed)

    def _publish(self, event: ChangeEvent) -> None:
        for feed in list(self._feeds):
            feed.publish(event)
