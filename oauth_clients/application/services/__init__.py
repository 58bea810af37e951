# oauth_clients/application/services/__init__.py

"""
Cache consistency services: the credential cache and its synchronizer.
"""

from oauth_clients.application.services.credential_cache import CredentialCache
from oauth_clients.application.services.client_synchronizer import (
    ClientSynchronizer,
    WatchState,
)

__all__ = [
    "CredentialCache",
    "ClientSynchronizer",
    "WatchState",
]
