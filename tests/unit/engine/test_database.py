"""Unit tests for bucket database transactions."""

from __future__ import annotations

from pathlib import Path
import sqlite3

import pytest

from core.errors import (
    AlreadyExistsError,
    BoltEngineError,
    ContainerNotFoundError,
    DatabaseNotFoundError,
    IncompatibleOperationError,
    KeyRequiredError,
    NotWritableError,
    TransactionClosedError,
)
from engine.database import Database


def _open_database(tmp_path: Path) -> Database:
    return Database.open(tmp_path / "test.db")


def test_open_creates_database_file(tmp_path: Path) -> None:
    """Opening a writable database should create the file."""
    database = _open_database(tmp_path)

    assert database.path.exists()


def test_open_read_only_requires_existing_file(tmp_path: Path) -> None:
    """Read-only open should fail for a missing file."""
    with pytest.raises(DatabaseNotFoundError):
        Database.open(tmp_path / "missing.db", read_only=True)

    assert not (tmp_path / "missing.db").exists()


def test_read_only_database_refuses_writable_transaction(tmp_path: Path) -> None:
    """A read-only database should not start writable transactions."""
    _open_database(tmp_path)
    database = Database.open(tmp_path / "test.db", read_only=True)

    with pytest.raises(NotWritableError):
        database.begin(writable=True)


def test_update_commits_on_success(tmp_path: Path) -> None:
    """Changes in an update block should be visible to later views."""
    database = _open_database(tmp_path)
    with database.update() as tx:
        tx.create_bucket(b"widgets").put(b"a", b"1")

    with database.view() as tx:
        bucket = tx.bucket(b"widgets")
        value = bucket.get(b"a") if bucket is not None else None

    assert value == b"1"


def test_update_rolls_back_on_error(tmp_path: Path) -> None:
    """An exception inside an update block should discard its changes."""
    database = _open_database(tmp_path)
    with pytest.raises(RuntimeError):
        with database.update() as tx:
            tx.create_bucket(b"widgets")
            raise RuntimeError("abort")

    with database.view() as tx:
        bucket = tx.bucket(b"widgets")

    assert bucket is None


def test_view_rejects_mutation(tmp_path: Path) -> None:
    """Read-only transactions should reject bucket creation."""
    database = _open_database(tmp_path)

    with database.view() as tx:
        with pytest.raises(NotWritableError):
            tx.create_bucket(b"widgets")
        writable = tx.writable()

    assert writable is False


def test_create_bucket_twice_raises_already_exists(tmp_path: Path) -> None:
    """Creating an existing top-level bucket should fail."""
    database = _open_database(tmp_path)

    with database.update() as tx:
        tx.create_bucket(b"x")
        with pytest.raises(AlreadyExistsError):
            tx.create_bucket(b"x")


def test_create_bucket_requires_key(tmp_path: Path) -> None:
    """Empty bucket names should be rejected."""
    database = _open_database(tmp_path)

    with database.update() as tx:
        with pytest.raises(KeyRequiredError):
            tx.create_bucket(b"")


def test_delete_missing_bucket_raises(tmp_path: Path) -> None:
    """Deleting an absent bucket should report it as not found."""
    database = _open_database(tmp_path)

    with database.update() as tx:
        with pytest.raises(ContainerNotFoundError):
            tx.delete_bucket(b"nope")


def test_delete_bucket_removes_subtree(tmp_path: Path) -> None:
    """Deleting a bucket should remove every nested bucket and value."""
    database = _open_database(tmp_path)
    with database.update() as tx:
        outer = tx.create_bucket(b"outer")
        inner = outer.create_bucket(b"inner")
        inner.put(b"k", b"v")
        inner.create_bucket(b"deeper").put(b"k2", b"v2")

    with database.update() as tx:
        tx.delete_bucket(b"outer")
        recreated = tx.create_bucket(b"outer")
        nested = recreated.bucket(b"inner")

    assert nested is None


def test_for_each_visits_keys_in_byte_order(tmp_path: Path) -> None:
    """Root iteration should follow byte order of keys."""
    database = _open_database(tmp_path)
    seen: list[bytes] = []
    with database.update() as tx:
        for name in (b"b", b"a", b"\xff", b"A"):
            tx.create_bucket(name)
        tx.for_each(lambda key, value: seen.append(key))

    assert seen == [b"A", b"a", b"b", b"\xff"]


def test_bucket_from_ended_transaction_fails_loudly(tmp_path: Path) -> None:
    """Using a bucket after its transaction ends should raise."""
    database = _open_database(tmp_path)
    with database.update() as tx:
        bucket = tx.create_bucket(b"widgets")

    with pytest.raises(TransactionClosedError):
        bucket.get(b"a")


def test_put_over_bucket_is_incompatible(tmp_path: Path) -> None:
    """A scalar cannot replace a nested bucket."""
    database = _open_database(tmp_path)

    with database.update() as tx:
        outer = tx.create_bucket(b"outer")
        outer.create_bucket(b"inner")
        with pytest.raises(IncompatibleOperationError):
            outer.put(b"inner", b"value")


def test_closed_database_refuses_transactions(tmp_path: Path) -> None:
    """A closed database should not begin new transactions."""
    with _open_database(tmp_path) as database:
        pass

    with pytest.raises(BoltEngineError):
        database.begin(writable=False)


def test_writable_flag_of_ended_transaction_fails_loudly(tmp_path: Path) -> None:
    """Querying writability after the transaction ends should raise."""
    database = _open_database(tmp_path)
    with database.view() as tx:
        pass

    with pytest.raises(TransactionClosedError):
        tx.writable()


def test_open_and_read_while_writer_holds_lock(tmp_path: Path) -> None:
    """Reads should proceed while another transaction holds the write lock."""
    database = Database.open(tmp_path / "busy.db", busy_timeout=0.2)
    with database.update() as tx:
        tx.create_bucket(b"a").put(b"k", b"v1")
    writer = database.begin(writable=True)
    try:
        writer.bucket(b"a").put(b"k", b"v2")  # type: ignore[union-attr]
        reopened = Database.open(tmp_path / "busy.db", busy_timeout=0.2)
        with reopened.view() as tx:
            value = tx.bucket(b"a").get(b"k")  # type: ignore[union-attr]
    finally:
        writer.rollback()

    assert value == b"v1"


def test_read_only_open_leaves_foreign_file_untouched(tmp_path: Path) -> None:
    """Reading a file without bucket tables should fail without creating them."""
    db_path = tmp_path / "foreign.db"
    connection = sqlite3.connect(str(db_path))
    connection.execute("CREATE TABLE notes (body TEXT)")
    connection.commit()
    connection.close()

    database = Database.open(db_path, read_only=True)
    with pytest.raises(BoltEngineError):
        with database.view() as tx:
            tx.bucket(b"a")
    connection = sqlite3.connect(str(db_path))
    tables = [row[0] for row in connection.execute("SELECT name FROM sqlite_master")]
    connection.close()

    assert tables == ["notes"]
