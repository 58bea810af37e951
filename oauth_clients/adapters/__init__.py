# oauth_clients/adapters/__init__.py
