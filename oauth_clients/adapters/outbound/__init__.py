# oauth_clients/adapters/outbound/__init__.py
