# oauth_clients/application/use_cases/__init__.py

"""
Application use cases.
"""

from oauth_clients.application.use_cases.client_use_cases import ClientManager

__all__ = [
    "ClientManager",
]
