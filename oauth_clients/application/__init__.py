# oauth_clients/application/__init__.py
