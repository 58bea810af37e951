# oauth_clients/application/ports/__init__.py
