# oauth_clients/adapters/configuration/__init__.py
