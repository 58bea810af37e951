# oauth_clients/shared/utils/__init__.py
