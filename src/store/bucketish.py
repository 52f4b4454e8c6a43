"""Capability contract shared by nested buckets and the root namespace.

Callers never check which variant they hold. ``RootBucket`` adapts a
transaction to the same contract as ``engine.Bucket`` and expresses the
root's restrictions as designated errors or empty results.
"""

from __future__ import annotations

from typing import Callable, Protocol

from core.errors import IncompatibleOperationError, TransactionClosedError
from core.types import WritePair
from engine.bucket import Bucket
from engine.transaction import Transaction


class Bucketish(Protocol):
    """Operations every bucket-like entity supports."""

    is_root: bool

    def bucket(self, key: bytes) -> Bucket | None: ...

    def create_bucket(self, key: bytes) -> Bucket: ...

    def create_bucket_if_not_exists(self, key: bytes) -> Bucket: ...

    def delete_bucket(self, key: bytes) -> None: ...

    def for_each(self, fn: Callable[[bytes, "bytes | None"], None]) -> None: ...

    def for_each_bucket(self, fn: Callable[[bytes, Bucket], None]) -> None: ...

    def writable(self) -> bool: ...

    def standalone_size(self) -> int: ...

    def get(self, key: bytes) -> bytes | None: ...

    def put(self, key: bytes, value: bytes) -> None: ...

    def delete(self, key: bytes) -> None: ...

    def multi_get(self, *keys: bytes) -> list[bytes | None]: ...

    def multi_put(self, *pairs: WritePair) -> None: ...

    def next_sequence(self) -> int: ...

    def sequence(self) -> int: ...

    def set_sequence(self, value: int) -> None: ...


def _root_rejects(operation: str) -> IncompatibleOperationError:
    return IncompatibleOperationError(f"{operation} is incompatible with the root bucket")


class RootBucket:
    """Top-level namespace of a transaction seen as a bucket.

    Wraps the transaction without owning it. The root holds only buckets,
    so scalar and sequence operations are rejected without reading the
    transaction, once it is confirmed to be open.
    """

    is_root = True

    def __init__(self, tx: Transaction) -> None:
        self._tx = tx

    @property
    def tx(self) -> Transaction:
        """Wrapped transaction."""
        return self._tx

    def __repr__(self) -> str:
        return "RootBucket()"

    # --- forwarded to the transaction

    def bucket(self, key: bytes) -> Bucket | None:
        return self._tx.bucket(key)

    def create_bucket(self, key: bytes) -> Bucket:
        return self._tx.create_bucket(key)

    def create_bucket_if_not_exists(self, key: bytes) -> Bucket:
        return self._tx.create_bucket_if_not_exists(key)

    def delete_bucket(self, key: bytes) -> None:
        self._tx.delete_bucket(key)

    def for_each(self, fn: Callable[[bytes, "bytes | None"], None]) -> None:
        self._tx.for_each(fn)

    def for_each_bucket(self, fn: Callable[[bytes, Bucket], None]) -> None:
        self._tx.for_each_bucket(fn)

    def writable(self) -> bool:
        return self._tx.writable()

    def standalone_size(self) -> int:
        return self._tx.standalone_size()

    # --- not supported by the root namespace

    def get(self, key: bytes) -> bytes | None:
        self._ensure_open()
        return None

    def put(self, key: bytes, value: bytes) -> None:
        self._ensure_open()
        raise _root_rejects("put")

    def delete(self, key: bytes) -> None:
        self._ensure_open()
        raise _root_rejects("delete")

    def multi_get(self, *keys: bytes) -> list[bytes | None]:
        self._ensure_open()
        raise _root_rejects("multi_get")

    def multi_put(self, *pairs: WritePair) -> None:
        self._ensure_open()
        raise _root_rejects("multi_put")

    def next_sequence(self) -> int:
        self._ensure_open()
        raise _root_rejects("next_sequence")

    def sequence(self) -> int:
        self._ensure_open()
        return 0

    def set_sequence(self, value: int) -> None:
        self._ensure_open()
        raise _root_rejects("set_sequence")

    def _ensure_open(self) -> None:
        if self._tx.closed:
            raise TransactionClosedError(
                "transaction has already ended; buckets and locations from it are invalid"
            )
