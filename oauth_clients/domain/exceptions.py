# oauth_clients/domain/exceptions.py

"""
Custom exceptions for the client credential cache.

This module defines the domain exceptions raised by the cache, the manager
and the store adapters. Each one carries a human readable detail and a
stable internal code that callers can map to their own error responses.
"""

from typing import Any, Optional


class ClientCacheException(Exception):
    """
    Base exception for all errors raised by the package.
    """

    def __init__(self, detail: Any = None, internal_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.internal_code = internal_code

    def __str__(self) -> str:
        return str(self.detail)


class ResourceNotFoundException(ClientCacheException):
    """Client not found."""

    def __init__(self, detail: str = "Client not found", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_NOT_FOUND"
        )
        self.resource_id = resource_id


class InvalidCredentialsException(ClientCacheException):
    """Invalid client credentials."""

    def __init__(self, detail: str = "Invalid client credentials"):
        super().__init__(
            detail=detail,
            internal_code="INVALID_CREDENTIALS"
        )


class HashingException(ClientCacheException):
    """Secret could not be hashed."""

    def __init__(self, detail: str = "Error hashing client secret",
                 original_error: Optional[Exception] = None):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            detail=f"{detail}{error_info}",
            internal_code="HASHING_ERROR"
        )
        self.original_error = original_error


class DatabaseOperationException(ClientCacheException):
    """Error in a persistence or connectivity operation against the store."""

    def __init__(self, detail: str = "Error executing store operation",
                 original_error: Optional[Exception] = None,
                 internal_code: str = "DATABASE_OPERATION_ERROR"):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            detail=f"{detail}{error_info}",
            internal_code=internal_code
        )
        self.original_error = original_error


class ResourceAlreadyExistsException(DatabaseOperationException):
    """A client with the same ID is already stored."""

    def __init__(self, detail: str = "Client already exists", resource_id: Any = None,
                 original_error: Optional[Exception] = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            detail=f"{detail}{resource_info}",
            original_error=original_error,
            internal_code="RESOURCE_ALREADY_EXISTS"
        )
        self.resource_id = resource_id
