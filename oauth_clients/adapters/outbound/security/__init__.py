# oauth_clients/adapters/outbound/security/__init__.py
