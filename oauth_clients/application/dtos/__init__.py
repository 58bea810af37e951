# oauth_clients/application/dtos/__init__.py
