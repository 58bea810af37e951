# oauth_clients/adapters/outbound/persistence/models/__init__.py

"""
Data models module.

Exports the SQLAlchemy models of the package together with their Base.
"""

from oauth_clients.adapters.outbound.persistence.database import Base
from oauth_clients.adapters.outbound.persistence.models.client_model import ClientModel

__all__ = [
    "Base",
    "ClientModel",
]
