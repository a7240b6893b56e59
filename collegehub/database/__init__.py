"""Database module - durable session storage backends."""

from .dynamodb_client import DynamoDBSessionStore
from .local_store import LocalSessionStore, MemorySessionStore
from .exceptions import (
    StorageException,
    NotFoundError,
    ThrottlingError,
    NetworkError,
    PermissionError,
)

__all__ = [
    "DynamoDBSessionStore",
    "LocalSessionStore",
    "MemorySessionStore",
    "StorageException",
    "NotFoundError",
    "ThrottlingError",
    "NetworkError",
    "PermissionError",
]
