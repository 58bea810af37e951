# oauth_clients/__init__.py

"""
In-memory OAuth client credential cache kept in sync with a persistent store.

The public entry points are the ClientManager facade and the
client_manager_lifespan context manager in oauth_clients.main.
"""

__version__ = "0.1.0"
