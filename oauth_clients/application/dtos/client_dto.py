# oauth_clients/application/dtos/client_dto.py

"""
Schemas for client documents and change notifications.

These DTOs validate what comes out of the store, either a row read back
from the table or the JSON payload of a change notification.
"""

from typing import List, Literal, Optional

from pydantic import Field, model_validator

from oauth_clients.application.dtos.base_dto import CustomBaseModel
from oauth_clients.domain.models.client_domain_model import ClientRecord


class ClientDocument(CustomBaseModel):
    """
    Stored representation of a client.
    """
    id: str = Field(..., min_length=1, description="Unique client identifier")
    secret: Optional[str] = Field(None, description="Hashed client secret")
    name: Optional[str] = None
    redirect_uris: Optional[List[str]] = None
    grant_types: Optional[List[str]] = None
    response_types: Optional[List[str]] = None
    scopes: Optional[List[str]] = None
    owner: Optional[str] = None
    policy_uri: Optional[str] = None
    tos_uri: Optional[str] = None
    client_uri: Optional[str] = None
    logo_uri: Optional[str] = None
    contacts: Optional[List[str]] = None
    public: bool = False

    @classmethod
    def from_domain(cls, record: ClientRecord) -> "ClientDocument":
        return cls(
            id=record.id,
            secret=record.secret,
            name=record.name,
            redirect_uris=list(record.redirect_uris),
            grant_types=list(record.grant_types),
            response_types=list(record.response_types),
            scopes=list(record.scopes),
            owner=record.owner,
            policy_uri=record.policy_uri,
            tos_uri=record.tos_uri,
            client_uri=record.client_uri,
            logo_uri=record.logo_uri,
            contacts=list(record.contacts),
            public=record.public,
        )

    def to_domain(self) -> ClientRecord:
        return ClientRecord(
            id=self.id,
            secret=self.secret or "",
            name=self.name or "",
            redirect_uris=tuple(self.redirect_uris or ()),
            grant_types=tuple(self.grant_types or ()),
            response_types=tuple(self.response_types or ()),
            scopes=tuple(self.scopes or ()),
            owner=self.owner or "",
            policy_uri=self.policy_uri or "",
            tos_uri=self.tos_uri or "",
            client_uri=self.client_uri or "",
            logo_uri=self.logo_uri or "",
            contacts=tuple(self.contacts or ()),
            public=self.public,
        )


class ChangeMessage(CustomBaseModel):
    """
    Change notification published by the store for every mutation.

    Only the affected IDs are published; the listener reads the new row back
    from the table.

    Example payload: {"op": "UPDATE", "old_id": "a", "new_id": "b"}
    """
    op: Literal["INSERT", "UPDATE", "DELETE"]
    old_id: Optional[str] = Field(None, min_length=1)
    new_id: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def check_ids_match_operation(self) -> "ChangeMessage":
        if self.op != "INSERT" and self.old_id is None:
            raise ValueError(f"{self.op} notification without old_id")
        if self.op != "DELETE" and self.new_id is None:
            raise ValueError(f"{self.op} notification without new_id")
        return self

    @classmethod
    def parse_payload(cls, payload: str) -> "ChangeMessage":
        """
        Parse a JSON notification payload.

        Raises:
            pydantic.ValidationError: If the payload is not a valid message
        """
        return cls.model_validate_json(payload)
