# oauth_clients/domain/models/client_domain_model.py

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class ClientRecord:
    """Domain model for a registered OAuth client."""
    id: str = ""  # Public identifier, assigned on create when empty
    secret: str = field(default="", repr=False)  # Hashed secret once persisted
    name: str = ""
    redirect_uris: Tuple[str, ...] = ()
    grant_types: Tuple[str, ...] = ()
    response_types: Tuple[str, ...] = ()
    scopes: Tuple[str, ...] = ()
    owner: str = ""
    policy_uri: str = ""
    tos_uri: str = ""
    client_uri: str = ""
    logo_uri: str = ""
    contacts: Tuple[str, ...] = ()
    public: bool = False
