"""Unit tests for mounted database sessions."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import BoltConfig
from core.errors import AliasNotFoundError, BoltUriError, DatabaseNotFoundError, NotWritableError
from core.types import MountSpec
from engine.database import Database
from store.key_actions import copy_value, read_value, write_value
from store.mount_session import MountSession


def _session(tmp_path: Path) -> MountSession:
    config = BoltConfig(busy_timeout=0.2, preview_limit=50, log_level="warning")
    return MountSession(config, [MountSpec(alias="main", path=str(tmp_path / "main.db"))])


def test_resolve_unknown_alias_raises(tmp_path: Path) -> None:
    """URIs must name a mounted alias."""
    session = _session(tmp_path)

    with pytest.raises(AliasNotFoundError):
        with session.resolve("bolt://other/k", writable=False):
            pass


def test_resolve_rejects_non_bolt_uri(tmp_path: Path) -> None:
    """Only bolt:// URIs can be resolved."""
    session = _session(tmp_path)

    with pytest.raises(BoltUriError):
        with session.resolve("s3://main/k", writable=False):
            pass


def test_read_of_missing_file_raises(tmp_path: Path) -> None:
    """Reads should not create database files."""
    session = _session(tmp_path)

    with pytest.raises(DatabaseNotFoundError):
        with session.resolve("bolt://main/k", writable=False):
            pass

    assert not (tmp_path / "main.db").exists()


def test_touch_creates_database(tmp_path: Path) -> None:
    """Touch should create and initialize the mounted file."""
    session = _session(tmp_path)

    created = session.touch("main")

    assert created.exists()


def test_write_is_committed(tmp_path: Path) -> None:
    """Writes through a writable resolution should be committed."""
    session = _session(tmp_path)
    with session.resolve("bolt://main/a", writable=True) as location:
        location.create_bucket_if_not_exists()
    with session.resolve("bolt://main/a/k", writable=True) as location:
        write_value(location, b"v1")

    with session.resolve("bolt://main/a/k", writable=False) as location:
        value = read_value(location)

    assert value == b"v1"


def test_nested_resolution_reuses_open_transaction(tmp_path: Path) -> None:
    """A second resolution of the same alias should share the transaction."""
    session = _session(tmp_path)

    with session.resolve("bolt://main/a", writable=True) as outer:
        outer.create_bucket_if_not_exists()
        with session.resolve("bolt://main/a/k", writable=False) as inner:
            inner.put(b"shared")
            value = inner.get()

    assert value == b"shared"


def test_nested_writable_inside_read_only_raises(tmp_path: Path) -> None:
    """An open read-only transaction cannot serve a writable resolution."""
    session = _session(tmp_path)
    session.touch("main")

    with session.resolve("bolt://main/", writable=False):
        with pytest.raises(NotWritableError):
            with session.resolve("bolt://main/k", writable=True):
                pass


def test_failed_block_rolls_back(tmp_path: Path) -> None:
    """An error inside a writable resolution should discard its writes."""
    session = _session(tmp_path)
    with pytest.raises(RuntimeError):
        with session.resolve("bolt://main/a", writable=True) as location:
            location.create_bucket()
            raise RuntimeError("abort")

    with session.resolve("bolt://main/a", writable=False) as location:
        bucket = location.as_bucketish()

    assert bucket is None and session.aliases() == ("main",)


def test_read_proceeds_while_writer_holds_lock(tmp_path: Path) -> None:
    """Reads should see committed data while another writer is active."""
    session = _session(tmp_path)
    with session.resolve("bolt://main/a", writable=True) as location:
        location.create_bucket_if_not_exists()
    with session.resolve("bolt://main/a/k", writable=True) as location:
        write_value(location, b"v1")
    writer = Database.open(tmp_path / "main.db").begin(writable=True)
    try:
        writer.bucket(b"a").put(b"k", b"v2")  # type: ignore[union-attr]
        with session.resolve("bolt://main/a/k", writable=False) as location:
            value = read_value(location)
    finally:
        writer.rollback()

    assert value == b"v1"


def test_copy_between_aliases_of_one_file(tmp_path: Path) -> None:
    """Two aliases of the same file should copy without waiting on themselves."""
    session = _session(tmp_path)
    session.mount(MountSpec(alias="twin", path=str(tmp_path / "main.db")))
    with session.resolve("bolt://main/a", writable=True) as location:
        location.create_bucket_if_not_exists()
    with session.resolve("bolt://main/a/k", writable=True) as location:
        write_value(location, b"v1")

    with session.resolve("bolt://twin/a/k2", writable=True) as destination:
        with session.resolve("bolt://main/a/k", writable=False) as source:
            copy_value(source, destination)
    with session.resolve("bolt://main/a/k2", writable=False) as location:
        value = read_value(location)

    assert value == b"v1"
