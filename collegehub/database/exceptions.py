"""
Exception hierarchy for durable session storage.

Every store backend translates its native failures into these types so the
session layer handles file and DynamoDB storage the same way.
"""


class StorageException(Exception):
    """
    Base exception for all session storage errors.
    """

    pass


class NotFoundError(StorageException):
    """
    Raised when a required storage location does not exist.

    Stores return None for missing keys; this is reserved for missing
    containers such as a DynamoDB table.
    """

    pass


class ThrottlingError(StorageException):
    """
    Raised when DynamoDB keeps throttling writes after retry exhaustion.
    """

    pass


class NetworkError(StorageException):
    """
    Raised when the storage backend cannot be reached (connection, DNS, I/O).
    """

    pass


class PermissionError(StorageException):
    """
    Raised when credentials or file permissions do not allow the operation.
    """

    pass
