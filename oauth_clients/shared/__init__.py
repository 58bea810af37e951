# oauth_clients/shared/__init__.py
