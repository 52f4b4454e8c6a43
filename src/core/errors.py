"""Boltnav exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Addressing failures, engine failures, and CLI failures each raise a
specific error type so callers can react without string matching.
"""

from __future__ import annotations


class BoltError(Exception):
    """Base exception for all boltnav failures."""


class BoltConfigError(BoltError):
    """Raised for invalid runtime configuration."""


class BoltUsageError(BoltError):
    """Raised when command-line arguments do not match any usage."""


class BoltUriError(BoltError):
    """Raised when an argument expected to be a bolt:// URI is not one."""


class AliasNotFoundError(BoltError):
    """Raised when no database was mounted under the requested alias."""


class DatabaseNotFoundError(BoltError):
    """Raised when a database file does not exist for a read-only mount."""


class BoltEngineError(BoltError):
    """Raised when the underlying SQLite engine fails."""


class HostFileError(BoltError):
    """Raised when a host file cannot be read or written during copy."""


class BoltStoreError(BoltError):
    """Base class for addressing and bucket operation failures."""


class ContainerNotFoundError(BoltStoreError):
    """Raised when a path segment is absent or is not a bucket."""


class KeyNotFoundError(BoltStoreError):
    """Raised when the terminal path segment resolves to nothing."""


class KeyIsBucketError(BoltStoreError):
    """Raised when a scalar was required but the key holds a bucket."""


class AlreadyExistsError(BoltStoreError):
    """Raised when creating a bucket where one already exists."""


class IncompatibleOperationError(BoltStoreError):
    """Raised for an operation that does not apply to the addressed entry."""


class RootDeletionError(IncompatibleOperationError):
    """Raised when deletion targets the root of a database."""

    def __init__(self) -> None:
        super().__init__("cowardly refusing to delete root of database")


class NotEmptyError(BoltStoreError):
    """Raised when a non-recursive delete targets a populated bucket."""


class NotWritableError(BoltStoreError):
    """Raised when mutation is attempted in a read-only transaction."""


class KeyRequiredError(BoltStoreError):
    """Raised when an empty key is passed to the engine."""


class InvalidSequenceError(BoltStoreError):
    """Raised when a bucket sequence would move backwards."""


class TransactionClosedError(BoltStoreError):
    """Raised when a bucket or location outlives its transaction."""
