# oauth_clients/domain/models/__init__.py
