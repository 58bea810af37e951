# oauth_clients/adapters/outbound/persistence/models/client_model.py

"""
Client model for OAuth client registration.

This module defines the ClientModel that represents applications
registered to authenticate against the authorization server.
"""

from sqlalchemy import Column, String, Boolean, DateTime, JSON, func

from oauth_clients.adapters.outbound.persistence.database import Base
from oauth_clients.application.dtos.client_dto import ClientDocument
from oauth_clients.domain.models.client_domain_model import ClientRecord


class ClientModel(Base):
    """
    Model representing a registered OAuth client.

    Every insert, update and delete on this table is published on the
    change notification channel by the trigger created in the migrations.

    Attributes:
        id: Public client identifier
        secret: Hash of the client secret
        name: Human readable client name
        redirect_uris: Allowed redirect URIs
        grant_types: Grant types the client may use
        response_types: Response types the client may use
        scopes: Scopes the client may request
        owner: Owner of the client
        public: Public clients do not authenticate with a secret
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """
    __tablename__ = "clients"

    id = Column(String, primary_key=True)
    secret = Column(String, nullable=False, default="")
    name = Column(String, nullable=False, default="")
    redirect_uris = Column(JSON, nullable=False, default=list)
    grant_types = Column(JSON, nullable=False, default=list)
    response_types = Column(JSON, nullable=False, default=list)
    scopes = Column(JSON, nullable=False, default=list)
    owner = Column(String, nullable=False, default="")
    policy_uri = Column(String, nullable=False, default="")
    tos_uri = Column(String, nullable=False, default="")
    client_uri = Column(String, nullable=False, default="")
    logo_uri = Column(String, nullable=False, default="")
    contacts = Column(JSON, nullable=False, default=list)
    public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    @classmethod
    def from_domain(cls, record: ClientRecord) -> "ClientModel":
        return cls(**ClientDocument.from_domain(record).model_dump())

    def to_domain(self) -> ClientRecord:
        return ClientDocument.model_validate(self).to_domain()

    def __repr__(self) -> str:
        """String representation of the ClientModel object."""
        return f"<ClientModel(id={self.id}, public={self.public})>"
