"""Deferred references to entries of a bucket.

A ``Location`` names "the entry ``key`` inside ``parent``" or, with no key,
"``parent`` itself". Building one touches nothing; every action method
queries the store afresh.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import (
    AlreadyExistsError,
    IncompatibleOperationError,
    NotWritableError,
)
from core.formatting import format_hex
from engine.bucket import Bucket
from store.bucketish import Bucketish


@dataclass(frozen=True)
class ScalarKind:
    """Location holds a scalar value."""

    value: bytes


@dataclass(frozen=True)
class BucketKind:
    """Location holds a nested bucket."""

    bucket: Bucketish


@dataclass(frozen=True)
class RootBucketKind:
    """Location is the root namespace of its transaction."""

    bucket: Bucketish


@dataclass(frozen=True)
class AbsentKind:
    """Nothing is stored at the location."""


ResolvedKind = ScalarKind | BucketKind | RootBucketKind | AbsentKind


@dataclass(frozen=True)
class Location:
    """Lazy ``(parent, key)`` reference into a transaction.

    Attributes:
        parent: Bucket or root adapter containing the entry.
        key: Child key, or ``None`` to address ``parent`` itself.
    """

    parent: Bucketish
    key: bytes | None = None

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.key is None:
            return "<root>" if self.parent.is_root else "<bucket>"
        return format_hex(self.key)

    def resolve_kind(self) -> ResolvedKind:
        """Interrogate the store for what currently lives here.

        A scalar is checked first, then a nested bucket, then (only when no
        key is set) the parent itself.
        """
        value = self.get()
        if value is not None:
            return ScalarKind(value)
        if self.key is not None:
            child = self.parent.bucket(self.key)
            if child is not None:
                return BucketKind(child)
            return AbsentKind()
        if self.parent.is_root:
            return RootBucketKind(self.parent)
        return BucketKind(self.parent)

    def get(self) -> bytes | None:
        """Return the scalar here, or ``None`` for buckets, the root, or absence."""
        if self.key is None:
            return None
        return self.parent.get(self.key)

    def put(self, value: bytes) -> None:
        """Store a scalar at this location.

        Raises:
            IncompatibleOperationError: If the location addresses a bucket itself.
            NotWritableError: If the transaction is read-only.
        """
        key = self._require_key("put")
        self._require_writable()
        self.parent.put(key, value)

    def delete(self) -> None:
        """Delete the scalar at this location."""
        key = self._require_key("delete")
        self._require_writable()
        self.parent.delete(key)

    def as_bucketish(self) -> Bucketish | None:
        """Return the bucket addressed here, or ``None`` if there is none."""
        if self.key is None:
            return self.parent
        return self.parent.bucket(self.key)

    def create_bucket(self) -> Bucket:
        """Create a bucket at this location.

        Raises:
            AlreadyExistsError: If a bucket already exists here.
            IncompatibleOperationError: If the location is the root namespace.
        """
        if self.key is not None:
            return self.parent.create_bucket(self.key)
        if not self.parent.is_root:
            raise AlreadyExistsError(f"bucket {self.describe()} already exists")
        raise IncompatibleOperationError("the root bucket always exists")

    def create_bucket_if_not_exists(self) -> Bucketish:
        """Return the bucket at this location, creating it when absent."""
        if self.key is not None:
            return self.parent.create_bucket_if_not_exists(self.key)
        if not self.parent.is_root:
            return self.parent
        raise IncompatibleOperationError("the root bucket always exists")

    def delete_bucket(self) -> None:
        """Delete the bucket at this location with everything below it.

        Raises:
            IncompatibleOperationError: If the location addresses its parent.
        """
        if self.key is None:
            raise IncompatibleOperationError(f"cannot delete {self.describe()} from itself")
        self.parent.delete_bucket(self.key)

    def writable(self) -> bool:
        return self.parent.writable()

    def _require_key(self, operation: str) -> bytes:
        if self.key is None:
            raise IncompatibleOperationError(
                f"{operation} needs a key; {self.describe()} is a bucket"
            )
        return self.key

    def _require_writable(self) -> None:
        if not self.parent.writable():
            raise NotWritableError("transaction not writable")
