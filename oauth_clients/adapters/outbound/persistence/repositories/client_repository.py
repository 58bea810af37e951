# oauth_clients/adapters/outbound/persistence/repositories/client_repository.py

"""
Repository for client operations.

This module implements the PostgreSQL client store used by the manager and
the synchronizer, implementing the IClientStore interface.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from oauth_clients.adapters.outbound.persistence.database import create_session_factory, get_db_context
from oauth_clients.adapters.outbound.persistence.models import ClientModel
from oauth_clients.adapters.outbound.persistence.repositories.change_feed import (
    PostgresChangeFeed,
    STORE_ERRORS,
)
from oauth_clients.application.ports.outbound import IClientStore
from oauth_clients.domain.exceptions import (
    DatabaseOperationException,
    ResourceAlreadyExistsException,
)
from oauth_clients.domain.models.client_domain_model import ClientRecord

logger = logging.getLogger(__name__)


class SQLAlchemyClientStore(IClientStore):
    """
    Client store on a PostgreSQL table with LISTEN/NOTIFY change feed.
    """

    def __init__(
            self,
            engine: AsyncEngine,
            channel: str = "client_changes",
            session_factory: Optional[async_sessionmaker] = None,
    ):
        self.engine = engine
        self.channel = channel
        self.session_factory = session_factory or create_session_factory(engine)

    async def insert(self, record: ClientRecord) -> None:
        """
        Insert a new client row.

        Raises:
            ResourceAlreadyExistsException: If the ID is already stored
            DatabaseOperationException: In case of database error
        """
        try:
            async with get_db_context(self.session_factory) as db:
                db.add(ClientModel.from_domain(record))
        except IntegrityError as e:
            logger.warning(f"Client already exists: {record.id}")
            raise ResourceAlreadyExistsException(resource_id=record.id, original_error=e) from e
        except STORE_ERRORS as e:
            logger.error(f"Error inserting client '{record.id}': {str(e)}")
            raise DatabaseOperationException(
                detail="Error inserting client",
                original_error=e
            ) from e

    async def delete(self, client_id: str) -> None:
        """
        Delete a client row. Deleting an unknown ID is a no-op.

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            async with get_db_context(self.session_factory) as db:
                result = await db.execute(delete(ClientModel).where(ClientModel.id == client_id))
        except STORE_ERRORS as e:
            logger.error(f"Error deleting client '{client_id}': {str(e)}")
            raise DatabaseOperationException(
                detail="Error deleting client",
                original_error=e
            ) from e

        if result.rowcount == 0:
            logger.debug(f"Delete of unknown client '{client_id}' ignored")

    async def scan_all(self) -> List[ClientRecord]:
        """
        Read every client row.

        Raises:
            DatabaseOperationException: In case of database error or an
                unreadable row
        """
        try:
            async with get_db_context(self.session_factory) as db:
                result = await db.execute(select(ClientModel))
                return [model.to_domain() for model in result.scalars().all()]
        except (*STORE_ERRORS, ValidationError) as e:
            logger.error(f"Error scanning clients: {str(e)}")
            raise DatabaseOperationException(
                detail="Error scanning clients",
                original_error=e
            ) from e

    async def get_by_client_id(self, client_id: str) -> Optional[ClientRecord]:
        """
        Read one client row.

        Returns:
            The stored record or None if the ID is unknown

        Raises:
            DatabaseOperationException: In case of database error or an
                unreadable row
        """
        try:
            async with get_db_context(self.session_factory) as db:
                model = await db.get(ClientModel, client_id)
                return model.to_domain() if model is not None else None
        except (*STORE_ERRORS, ValidationError) as e:
            logger.error(f"Error reading client '{client_id}': {str(e)}")
            raise DatabaseOperationException(
                detail="Error reading client",
                original_error=e
            ) from e

    async def subscribe_changes(self) -> PostgresChangeFeed:
        return await PostgresChangeFeed.open(self.engine, self.channel, self.get_by_client_id)
