"""Nested bucket handles.

A ``Bucket`` is a lightweight handle (transaction plus bucket id). All state
lives in the database, so two handles for the same bucket compare equal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from core.types import WritePair

if TYPE_CHECKING:
    from engine.transaction import Transaction


class Bucket:
    """Nested bucket holding scalar values and further buckets."""

    is_root = False

    def __init__(self, tx: "Transaction", bucket_id: int) -> None:
        self._tx = tx
        self._bucket_id = bucket_id

    @property
    def bucket_id(self) -> int:
        """Engine identifier of this bucket."""
        return self._bucket_id

    @property
    def tx(self) -> "Transaction":
        """Transaction this handle belongs to."""
        return self._tx

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bucket):
            return NotImplemented
        return self._tx is other._tx and self._bucket_id == other._bucket_id

    def __hash__(self) -> int:
        return hash((id(self._tx), self._bucket_id))

    def __repr__(self) -> str:
        return f"Bucket(id={self._bucket_id})"

    def bucket(self, key: bytes) -> "Bucket | None":
        return self._tx.child_bucket(self._bucket_id, key)

    def create_bucket(self, key: bytes) -> "Bucket":
        return self._tx.create_child_bucket(self._bucket_id, key)

    def create_bucket_if_not_exists(self, key: bytes) -> "Bucket":
        return self._tx.create_child_bucket_if_not_exists(self._bucket_id, key)

    def delete_bucket(self, key: bytes) -> None:
        self._tx.delete_child_bucket(self._bucket_id, key)

    def for_each(self, fn: Callable[[bytes, "bytes | None"], None]) -> None:
        self._tx.visit_entries(self._bucket_id, fn)

    def for_each_bucket(self, fn: Callable[[bytes, "Bucket"], None]) -> None:
        self._tx.visit_buckets(self._bucket_id, fn)

    def writable(self) -> bool:
        return self._tx.writable()

    def standalone_size(self) -> int:
        return self._tx.bucket_size(self._bucket_id)

    def get(self, key: bytes) -> bytes | None:
        return self._tx.get_value(self._bucket_id, key)

    def put(self, key: bytes, value: bytes) -> None:
        self._tx.put_value(self._bucket_id, key, value)

    def delete(self, key: bytes) -> None:
        self._tx.delete_value(self._bucket_id, key)

    def multi_get(self, *keys: bytes) -> list[bytes | None]:
        """Return values for several keys in argument order."""
        return [self.get(key) for key in keys]

    def multi_put(self, *pairs: WritePair) -> None:
        """Store several values in one call."""
        self._tx.put_values(self._bucket_id, pairs)

    def next_sequence(self) -> int:
        """Return a new, persisted, monotonically increasing integer."""
        return self._tx.increment_sequence(self._bucket_id)

    def sequence(self) -> int:
        return self._tx.read_sequence(self._bucket_id)

    def set_sequence(self, value: int) -> None:
        self._tx.write_sequence(self._bucket_id, value)
