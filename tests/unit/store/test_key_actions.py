"""Unit tests for user-level key actions."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import (
    AlreadyExistsError,
    ContainerNotFoundError,
    HostFileError,
    KeyIsBucketError,
    KeyNotFoundError,
    NotEmptyError,
    RootDeletionError,
)
from engine.database import Database
from store.key_actions import (
    KIND_BUCKET,
    KIND_ROOT_BUCKET,
    KIND_SCALAR,
    copy_value,
    disk_usage_of,
    export_value_to_file,
    import_value_from_file,
    list_location,
    make_bucket,
    read_value,
    remove_key,
    tree_of,
    write_value,
)
from store.location import AbsentKind
from store.navigation import resolve_path


def _database(tmp_path: Path, name: str = "actions.db") -> Database:
    database = Database.open(tmp_path / name)
    with database.update() as tx:
        docs = tx.create_bucket(b"docs")
        docs.put(b"readme", b"hello")
        docs.create_bucket(b"drafts").put(b"one", b"1")
        tx.create_bucket(b"empty")
    return database


def test_read_value_returns_scalar(tmp_path: Path) -> None:
    """Reading a scalar location should return its bytes."""
    database = _database(tmp_path)

    with database.view() as tx:
        value = read_value(resolve_path(tx, "docs/readme"))

    assert value == b"hello"


def test_read_value_on_bucket_raises(tmp_path: Path) -> None:
    """Reading a bucket should report that the key is a bucket."""
    database = _database(tmp_path)

    with database.view() as tx:
        with pytest.raises(KeyIsBucketError):
            read_value(resolve_path(tx, "docs/drafts"))


def test_read_value_on_root_raises(tmp_path: Path) -> None:
    """Reading the root should report that the key is a bucket."""
    database = _database(tmp_path)

    with database.view() as tx:
        with pytest.raises(KeyIsBucketError):
            read_value(resolve_path(tx, ""))


def test_read_value_on_missing_key_raises(tmp_path: Path) -> None:
    """Reading a missing key should report it as not found."""
    database = _database(tmp_path)

    with database.view() as tx:
        with pytest.raises(KeyNotFoundError):
            read_value(resolve_path(tx, "docs/nothing"))


def test_make_bucket_exclusive_fails_when_present(tmp_path: Path) -> None:
    """Exclusive creation should fail on an existing bucket."""
    database = _database(tmp_path)

    with database.update() as tx:
        make_bucket(resolve_path(tx, "x"), exclusive=True)
        with pytest.raises(AlreadyExistsError):
            make_bucket(resolve_path(tx, "x"), exclusive=True)


def test_make_bucket_default_is_idempotent(tmp_path: Path) -> None:
    """Default creation should reuse an existing bucket."""
    database = _database(tmp_path)

    with database.update() as tx:
        first = make_bucket(resolve_path(tx, "docs/drafts"))
        second = make_bucket(resolve_path(tx, "docs/drafts"))

    assert first == second


def test_remove_non_empty_bucket_requires_recursive(tmp_path: Path) -> None:
    """Deleting a populated bucket without the flag should fail."""
    database = _database(tmp_path)

    with database.update() as tx:
        with pytest.raises(NotEmptyError):
            remove_key(resolve_path(tx, "docs"))
        remove_key(resolve_path(tx, "docs"), recursive=True)
        kind = resolve_path(tx, "docs").resolve_kind()

    assert kind == AbsentKind()


def test_remove_empty_bucket_succeeds(tmp_path: Path) -> None:
    """Empty buckets should be removable without the flag."""
    database = _database(tmp_path)

    with database.update() as tx:
        remove_key(resolve_path(tx, "empty"))
        kind = resolve_path(tx, "empty").resolve_kind()

    assert kind == AbsentKind()


def test_remove_root_is_refused(tmp_path: Path) -> None:
    """The root namespace must never be deleted."""
    database = _database(tmp_path)

    with database.update() as tx:
        with pytest.raises(RootDeletionError):
            remove_key(resolve_path(tx, "/"), recursive=True)


def test_remove_scalar_and_missing(tmp_path: Path) -> None:
    """Scalars should be deletable; missing keys should raise."""
    database = _database(tmp_path)

    with database.update() as tx:
        remove_key(resolve_path(tx, "docs/readme"))
        with pytest.raises(KeyNotFoundError):
            remove_key(resolve_path(tx, "docs/readme"))


def test_list_location_labels_kinds(tmp_path: Path) -> None:
    """Listing should label roots, buckets, and scalars."""
    database = _database(tmp_path)

    with database.view() as tx:
        root_label, root_entries = list_location(resolve_path(tx, ""), 50)
        bucket_label, _ = list_location(resolve_path(tx, "docs"), 50)
        scalar_label, scalar_entries = list_location(resolve_path(tx, "docs/readme"), 50)

    assert (root_label, bucket_label, scalar_label) == (
        KIND_ROOT_BUCKET,
        KIND_BUCKET,
        KIND_SCALAR,
    ) and [entry.key for entry in root_entries] == [b"docs", b"empty"] and scalar_entries == []


def test_tree_of_scalar_raises(tmp_path: Path) -> None:
    """Tree listings need a bucket."""
    database = _database(tmp_path)

    with database.view() as tx:
        with pytest.raises(ContainerNotFoundError):
            tree_of(resolve_path(tx, "docs/readme"))


def test_disk_usage_of_bucket(tmp_path: Path) -> None:
    """Disk usage below a bucket should list nested buckets."""
    database = _database(tmp_path)

    with database.view() as tx:
        entries = disk_usage_of(resolve_path(tx, "docs"))

    assert [entry.key for entry in entries] == [b"drafts"]


def test_copy_value_between_databases(tmp_path: Path) -> None:
    """Copying should carry exact bytes across databases."""
    source_db = _database(tmp_path, "src.db")
    destination_db = Database.open(tmp_path / "dst.db")
    with destination_db.update() as tx:
        tx.create_bucket(b"dst")

    with source_db.view() as source_tx, destination_db.update() as destination_tx:
        copied = copy_value(
            resolve_path(source_tx, "docs/readme"),
            resolve_path(destination_tx, "dst/k2"),
        )
    with destination_db.view() as tx:
        value = read_value(resolve_path(tx, "dst/k2"))

    assert copied == 5 and value == b"hello"


def test_copy_missing_value_raises(tmp_path: Path) -> None:
    """Copying from a key without a scalar should fail."""
    database = _database(tmp_path)

    with database.update() as tx:
        with pytest.raises(KeyNotFoundError):
            copy_value(resolve_path(tx, "docs/drafts"), resolve_path(tx, "docs/copy"))


def test_export_and_import_host_file(tmp_path: Path) -> None:
    """Values should move between keys and host files unchanged."""
    database = _database(tmp_path)
    exported = tmp_path / "readme.bin"

    with database.update() as tx:
        export_value_to_file(resolve_path(tx, "docs/readme"), exported)
        import_value_from_file(exported, resolve_path(tx, "empty/readme"))
        value = read_value(resolve_path(tx, "empty/readme"))

    assert exported.read_bytes() == b"hello" and value == b"hello"


def test_import_missing_host_file_raises(tmp_path: Path) -> None:
    """A missing host file should surface as a host file error."""
    database = _database(tmp_path)

    with database.update() as tx:
        with pytest.raises(HostFileError):
            import_value_from_file(tmp_path / "absent.bin", resolve_path(tx, "docs/x"))


def test_write_value_roundtrips_empty_bytes(tmp_path: Path) -> None:
    """Empty values should round-trip through write and read."""
    database = _database(tmp_path)

    with database.update() as tx:
        write_value(resolve_path(tx, "docs/blank"), b"")
        value = read_value(resolve_path(tx, "docs/blank"))

    assert value == b""
