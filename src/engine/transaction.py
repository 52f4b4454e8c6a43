"""Transactions over a bucket database.

A transaction owns one SQLite connection for its whole lifetime. Root-level
operations live on the transaction itself; nested buckets delegate their
reads and writes back to it with their own bucket id.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Callable

from core.constants import LEAF_ELEMENT_HEADER_SIZE, ROOT_BUCKET_ID
from core.errors import (
    AlreadyExistsError,
    BoltEngineError,
    ContainerNotFoundError,
    IncompatibleOperationError,
    InvalidSequenceError,
    KeyRequiredError,
    NotWritableError,
    TransactionClosedError,
)
from core.formatting import format_hex
from core.logging_config import get_logger
from core.types import WritePair
from engine import schema
from engine.bucket import Bucket

_LOGGER = get_logger(__name__)

EntryVisitor = Callable[[bytes, "bytes | None"], None]
BucketVisitor = Callable[[bytes, Bucket], None]


class Transaction:
    """Read-only or read-write view of a database.

    The root namespace holds only buckets. Every bucket handed out by a
    transaction becomes unusable once the transaction commits or rolls back.
    """

    def __init__(self, connection: sqlite3.Connection, writable: bool) -> None:
        self._connection = connection
        self._writable = writable
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the transaction already committed or rolled back."""
        return self._closed

    def writable(self) -> bool:
        """Return whether this transaction accepts mutations."""
        self._ensure_open()
        return self._writable

    def bucket(self, name: bytes) -> Bucket | None:
        """Return the top-level bucket stored under ``name``."""
        return self.child_bucket(ROOT_BUCKET_ID, name)

    def create_bucket(self, name: bytes) -> Bucket:
        """Create a top-level bucket, failing if one already exists."""
        return self.create_child_bucket(ROOT_BUCKET_ID, name)

    def create_bucket_if_not_exists(self, name: bytes) -> Bucket:
        """Return the top-level bucket ``name``, creating it when absent."""
        return self.create_child_bucket_if_not_exists(ROOT_BUCKET_ID, name)

    def delete_bucket(self, name: bytes) -> None:
        """Delete a top-level bucket and everything below it."""
        self.delete_child_bucket(ROOT_BUCKET_ID, name)

    def for_each(self, fn: EntryVisitor) -> None:
        """Visit every top-level entry in key order."""
        self.visit_entries(ROOT_BUCKET_ID, fn)

    def for_each_bucket(self, fn: BucketVisitor) -> None:
        """Visit every top-level bucket in key order."""
        self.visit_buckets(ROOT_BUCKET_ID, fn)

    def standalone_size(self) -> int:
        """Return the footprint of the root namespace itself."""
        return self.bucket_size(ROOT_BUCKET_ID)

    def commit(self) -> None:
        """Persist changes and release the connection.

        Raises:
            BoltEngineError: If SQLite rejects the commit.
        """
        self._ensure_open()
        try:
            self._connection.execute("COMMIT")
        except sqlite3.Error as error:
            self._release()
            raise BoltEngineError(f"Failed to commit transaction: {error}.") from error
        self._release()
        _LOGGER.debug("transaction_committed", writable=self._writable)

    def rollback(self) -> None:
        """Discard changes and release the connection."""
        if self._closed:
            return
        try:
            self._connection.execute("ROLLBACK")
        except sqlite3.Error as error:
            _LOGGER.warning("transaction_rollback_failed", error=str(error))
        finally:
            self._release()
        _LOGGER.debug("transaction_rolled_back", writable=self._writable)

    # --- bucket-id level operations shared with Bucket

    def child_bucket(self, bucket_id: int, key: bytes) -> Bucket | None:
        """Return the nested bucket under ``key`` of bucket ``bucket_id``."""
        row = self._entry(bucket_id, key)
        if row is None or row[1] is None:
            return None
        return Bucket(self, int(row[1]))

    def create_child_bucket(self, bucket_id: int, key: bytes) -> Bucket:
        """Create a nested bucket.

        Raises:
            AlreadyExistsError: If a bucket already occupies ``key``.
            IncompatibleOperationError: If a scalar occupies ``key``.
        """
        self._ensure_writable()
        _require_key(key)
        row = self._entry(bucket_id, key)
        if row is not None:
            if row[1] is not None:
                raise AlreadyExistsError(f"bucket {format_hex(key)} already exists")
            raise IncompatibleOperationError(
                f"key {format_hex(key)} holds a value, not a bucket"
            )
        cursor = self._execute(schema.INSERT_BUCKET)
        child_id = int(cursor.lastrowid)
        self._execute(schema.INSERT_CHILD_ENTRY, (bucket_id, key, child_id))
        _LOGGER.debug("bucket_created", parent_id=bucket_id, bucket_id=child_id)
        return Bucket(self, child_id)

    def create_child_bucket_if_not_exists(self, bucket_id: int, key: bytes) -> Bucket:
        """Return the nested bucket under ``key``, creating it when absent."""
        existing = self.child_bucket(bucket_id, key)
        if existing is not None:
            return existing
        return self.create_child_bucket(bucket_id, key)

    def delete_child_bucket(self, bucket_id: int, key: bytes) -> None:
        """Delete a nested bucket together with its whole subtree.

        Raises:
            ContainerNotFoundError: If no entry exists under ``key``.
            IncompatibleOperationError: If ``key`` holds a scalar.
        """
        self._ensure_writable()
        _require_key(key)
        row = self._entry(bucket_id, key)
        if row is None:
            raise ContainerNotFoundError(f"bucket {format_hex(key)} not found")
        if row[1] is None:
            raise IncompatibleOperationError(
                f"key {format_hex(key)} holds a value, not a bucket"
            )
        subtree_ids = [
            (int(item[0]),)
            for item in self._execute(schema.SELECT_SUBTREE_IDS, (int(row[1]),)).fetchall()
        ]
        self._executemany(schema.DELETE_BUCKET_ENTRIES, subtree_ids)
        self._executemany(schema.DELETE_BUCKET, subtree_ids)
        self._execute(schema.DELETE_ENTRY, (bucket_id, key))
        _LOGGER.info("bucket_deleted", parent_id=bucket_id, removed_buckets=len(subtree_ids))

    def get_value(self, bucket_id: int, key: bytes) -> bytes | None:
        """Return the scalar stored under ``key``; ``None`` for buckets or absence."""
        row = self._entry(bucket_id, key)
        if row is None or row[1] is not None:
            return None
        return bytes(row[0])

    def put_value(self, bucket_id: int, key: bytes, value: bytes) -> None:
        """Store a scalar under ``key``.

        Raises:
            IncompatibleOperationError: If a bucket occupies ``key``.
        """
        self._ensure_writable()
        _require_key(key)
        row = self._entry(bucket_id, key)
        if row is not None and row[1] is not None:
            raise IncompatibleOperationError(
                f"key {format_hex(key)} holds a bucket, not a value"
            )
        self._execute(schema.UPSERT_VALUE, (bucket_id, key, bytes(value)))

    def put_values(self, bucket_id: int, pairs: tuple[WritePair, ...]) -> None:
        """Store several scalars; all keys are validated before any write."""
        self._ensure_writable()
        for pair in pairs:
            _require_key(pair.key)
            row = self._entry(bucket_id, pair.key)
            if row is not None and row[1] is not None:
                raise IncompatibleOperationError(
                    f"key {format_hex(pair.key)} holds a bucket, not a value"
                )
        self._executemany(
            schema.UPSERT_VALUE,
            [(bucket_id, pair.key, pair.value) for pair in pairs],
        )

    def delete_value(self, bucket_id: int, key: bytes) -> None:
        """Delete the scalar under ``key``; deleting a missing key is a no-op.

        Raises:
            IncompatibleOperationError: If a bucket occupies ``key``.
        """
        self._ensure_writable()
        _require_key(key)
        row = self._entry(bucket_id, key)
        if row is None:
            return
        if row[1] is not None:
            raise IncompatibleOperationError(
                f"key {format_hex(key)} holds a bucket, not a value"
            )
        self._execute(schema.DELETE_ENTRY, (bucket_id, key))

    def visit_entries(self, bucket_id: int, fn: EntryVisitor) -> None:
        """Call ``fn(key, value)`` per entry; ``value`` is ``None`` for buckets.

        Entries are read before the first call, so ``fn`` may mutate the
        bucket. An exception raised by ``fn`` stops iteration and propagates.
        """
        rows = self._execute(schema.SELECT_ENTRIES, (bucket_id,)).fetchall()
        for key, value, child_id in rows:
            fn(bytes(key), None if child_id is not None else bytes(value))

    def visit_buckets(self, bucket_id: int, fn: BucketVisitor) -> None:
        """Call ``fn(key, bucket)`` per nested bucket."""
        rows = self._execute(schema.SELECT_CHILD_BUCKETS, (bucket_id,)).fetchall()
        for key, child_id in rows:
            fn(bytes(key), Bucket(self, int(child_id)))

    def bucket_size(self, bucket_id: int) -> int:
        """Return key and value bytes plus per-entry headers, children excluded."""
        count, payload_bytes = self._execute(
            schema.SELECT_STANDALONE_SIZE, (bucket_id,)
        ).fetchone()
        return int(payload_bytes) + int(count) * LEAF_ELEMENT_HEADER_SIZE

    def read_sequence(self, bucket_id: int) -> int:
        """Return the current sequence of a bucket."""
        row = self._execute(schema.SELECT_SEQUENCE, (bucket_id,)).fetchone()
        return int(row[0]) if row is not None else 0

    def increment_sequence(self, bucket_id: int) -> int:
        """Advance and return the sequence of a bucket."""
        self._ensure_writable()
        next_value = self.read_sequence(bucket_id) + 1
        self._execute(schema.UPDATE_SEQUENCE, (next_value, bucket_id))
        return next_value

    def write_sequence(self, bucket_id: int, value: int) -> None:
        """Set the sequence of a bucket.

        Raises:
            InvalidSequenceError: If ``value`` is lower than the current sequence.
        """
        self._ensure_writable()
        current = self.read_sequence(bucket_id)
        if value < current:
            raise InvalidSequenceError(
                f"sequence cannot move backwards from {current} to {value}"
            )
        self._execute(schema.UPDATE_SEQUENCE, (value, bucket_id))

    def _entry(self, bucket_id: int, key: bytes) -> tuple[Any, Any] | None:
        """Fetch the raw ``(value, child_id)`` row for a key."""
        self._ensure_open()
        if not key:
            return None
        return self._execute(schema.SELECT_ENTRY, (bucket_id, bytes(key))).fetchone()

    def _execute(self, statement: str, parameters: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Run one statement, translating engine failures."""
        self._ensure_open()
        try:
            return self._connection.execute(statement, parameters)
        except sqlite3.Error as error:
            raise BoltEngineError(f"SQLite statement failed: {error}.") from error

    def _executemany(self, statement: str, rows: list[tuple[Any, ...]]) -> None:
        """Run one statement per parameter row, translating engine failures."""
        self._ensure_open()
        try:
            self._connection.executemany(statement, rows)
        except sqlite3.Error as error:
            raise BoltEngineError(f"SQLite statement failed: {error}.") from error

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransactionClosedError(
                "transaction has already ended; buckets and locations from it are invalid"
            )

    def _ensure_writable(self) -> None:
        self._ensure_open()
        if not self._writable:
            raise NotWritableError("transaction not writable")

    def _release(self) -> None:
        self._closed = True
        self._connection.close()


def _require_key(key: bytes) -> None:
    if not key:
        raise KeyRequiredError("key required")
