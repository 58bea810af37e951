# oauth_clients/domain/__init__.py

"""
Domain components: client records, change events and exceptions.
"""

from oauth_clients.domain.exceptions import (
    ClientCacheException,
    ResourceNotFoundException,
    ResourceAlreadyExistsException,
    InvalidCredentialsException,
    HashingException,
    DatabaseOperationException,
)
from oauth_clients.domain.models.client_domain_model import ClientRecord
from oauth_clients.domain.models.change_event import ChangeEvent

__all__ = [
    "ClientCacheException",
    "ResourceNotFoundException",
    "ResourceAlreadyExistsException",
    "InvalidCredentialsException",
    "HashingException",
    "DatabaseOperationException",
    "ClientRecord",
    "ChangeEvent",
]
