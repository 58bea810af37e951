# oauth_clients/adapters/outbound/persistence/__init__.py
