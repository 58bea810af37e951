# oauth_clients/adapters/outbound/persistence/repositories/change_feed.py

"""
PostgreSQL change subscription.

The clients table publishes the IDs touched by every mutation with pg_notify
(see the migrations). This module LISTENs on that channel through the
asyncpg connection behind a SQLAlchemy AsyncConnection, reads the new row
back by ID and exposes the notifications as an async iterator of
ChangeEvents.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import asyncpg
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from oauth_clients.application.dtos.client_dto import ChangeMessage
from oauth_clients.application.ports.outbound import IChangeFeed
from oauth_clients.domain.exceptions import DatabaseOperationException
from oauth_clients.domain.models.change_event import ChangeEvent
from oauth_clients.domain.models.client_domain_model import ClientRecord

logger = logging.getLogger(__name__)

STORE_ERRORS = (SQLAlchemyError, asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

_CLOSED = object()
_TERMINATED = object()

ClientLoader = Callable[[str], Awaitable[Optional[ClientRecord]]]


class PostgresChangeFeed(IChangeFeed):
    """
    Change feed fed by asyncpg notification callbacks.

    Notifications are queued by the listener callback and resolved when
    consumed. A malformed notification is logged and skipped; losing the
    connection or failing to read a row raises DatabaseOperationException
    from __anext__.
    """

    def __init__(
            self,
            driver_connection: Any,
            channel: str,
            load_client: ClientLoader,
            release: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        """
        Args:
            driver_connection: asyncpg connection to listen on
            channel: Notification channel name
            load_client: Coroutine function reading a client row by ID, None if absent
            release: Coroutine function returning the connection to its owner
        """
        self.channel = channel
        self._driver = driver_connection
        self._load_client = load_client
        self._release = release
        self._queue: asyncio.Queue = asyncio.Queue()
        self._listening = False
        self._closed = False

    @classmethod
    async def open(cls, engine: AsyncEngine, channel: str, load_client: ClientLoader) -> "PostgresChangeFeed":
        """
        Check out a connection from engine and start listening on channel.

        Raises:
            DatabaseOperationException: If the connection or LISTEN fails
        """
        connection = None
        try:
            connection = await engine.connect()
            raw_connection = await connection.get_raw_connection()
            feed = cls(raw_connection.driver_connection, channel, load_client, release=connection.close)
            await feed.listen()
            return feed
        except STORE_ERRORS as e:
            if connection is not None:
                await connection.close()
            raise DatabaseOperationException(
                detail="Error subscribing to client changes",
                original_error=e
            ) from e

    async def listen(self) -> None:
        await self._driver.add_listener(self.channel, self._on_notification)
        self._driver.add_termination_listener(self._on_termination)
        self._listening = True
        logger.debug(f"Listening for client changes on channel '{self.channel}'")

    def _on_notification(self, connection: Any, pid: int, channel: str, payload: str) -> None:
        self._queue.put_nowait(payload)

    def _on_termination(self, connection: Any) -> None:
        self._queue.put_nowait(_TERMINATED)

    async def __anext__(self) -> ChangeEvent:
        while True:
            if self._closed:
                raise StopAsyncIteration

            item = await self._queue.get()
            if item is _CLOSED:
                raise StopAsyncIteration
            if item is _TERMINATED:
                raise DatabaseOperationException(detail="Client change subscription connection lost")

            try:
                message = ChangeMessage.parse_payload(item)
            except ValidationError as e:
                logger.warning(f"Skipping malformed client change notification: {e}")
                continue

            event = await self._resolve(message)
            if event is not None:
                return event

    async def _resolve(self, message: ChangeMessage) -> Optional[ChangeEvent]:
        """
        Turn a notification into a ChangeEvent.

        The old value only needs its ID. The new value is the row as stored
        now; if it is already gone the event degrades to a delete of the old
        ID, and a later delete notification covers the rest.
        """
        old = ClientRecord(id=message.old_id) if message.old_id else None
        new = None
        if message.new_id:
            new = await self._load_client(message.new_id)
            if new is None:
                logger.debug(f"Client '{message.new_id}' no longer stored when its change arrived")

        if old is None and new is None:
            return None
        return ChangeEvent(old_value=old, new_value=new)

    async def close(self) -> None:
        """Stop listening and release the connection. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

        try:
            if self._listening and not self._driver.is_closed():
                await self._driver.remove_listener(self.channel, self._on_notification)
            self._driver.remove_termination_listener(self._on_termination)
        except STORE_ERRORS as e:
            logger.warning(f"Error removing client change listener: {e}")
        finally:
            self._listening = False
            if self._release is not None:
                await self._release()
