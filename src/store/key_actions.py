"""User-level actions on resolved locations.

These functions turn resolved kinds into the errors a caller expects
(missing key, key is a bucket, bucket not empty) and implement the
composite operations of the command-line tool.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import EXPORT_FILE_MODE, UNBOUNDED_DEPTH
from core.errors import (
    ContainerNotFoundError,
    HostFileError,
    KeyIsBucketError,
    KeyNotFoundError,
    NotEmptyError,
    RootDeletionError,
)
from core.logging_config import get_logger
from core.types import ListingEntry, TreeEntry, UsageEntry
from store.bucketish import Bucketish
from store.location import BucketKind, Location, RootBucketKind, ScalarKind
from store.traversal import bucket_is_empty, list_entries, walk_disk_usage, walk_tree

_LOGGER = get_logger(__name__)

KIND_BUCKET = "bucket"
KIND_ROOT_BUCKET = "root bucket"
KIND_SCALAR = "scalar value"


def read_value(location: Location) -> bytes:
    """Return the scalar stored at a location.

    Raises:
        KeyIsBucketError: If the location holds a bucket or is the root.
        KeyNotFoundError: If nothing is stored there.
    """
    kind = location.resolve_kind()
    if isinstance(kind, ScalarKind):
        return kind.value
    if isinstance(kind, (BucketKind, RootBucketKind)):
        raise KeyIsBucketError(f"key is bucket: {location.describe()}")
    raise KeyNotFoundError(f"key not found: {location.describe()}")


def write_value(location: Location, value: bytes) -> None:
    """Store a scalar at a location."""
    location.put(value)


def make_bucket(location: Location, exclusive: bool = False) -> Bucketish:
    """Create a bucket at a location.

    Args:
        location: Target location.
        exclusive: Fail with ``AlreadyExistsError`` when a bucket exists.

    Returns:
        The created or existing bucket.
    """
    if exclusive:
        return location.create_bucket()
    return location.create_bucket_if_not_exists()


def remove_key(location: Location, recursive: bool = False) -> None:
    """Delete the value or bucket at a location.

    Args:
        location: Target location.
        recursive: Allow deleting a bucket that still has entries.

    Raises:
        RootDeletionError: If the location is the root namespace.
        NotEmptyError: If a populated bucket is targeted without ``recursive``.
        KeyNotFoundError: If nothing is stored there.
    """
    kind = location.resolve_kind()
    if isinstance(kind, RootBucketKind):
        raise RootDeletionError()
    if isinstance(kind, BucketKind):
        if not (recursive or bucket_is_empty(kind.bucket)):
            raise NotEmptyError(f"bucket not empty: {location.describe()}")
        location.delete_bucket()
        _LOGGER.info("key_removed", kind=KIND_BUCKET, recursive=recursive)
        return
    if isinstance(kind, ScalarKind):
        location.delete()
        _LOGGER.info("key_removed", kind=KIND_SCALAR)
        return
    raise KeyNotFoundError(f"key not found: {location.describe()}")


def list_location(location: Location, preview_limit: int) -> tuple[str, list[ListingEntry]]:
    """Describe what a location holds and list its children when it is a bucket.

    Returns:
        Kind label and direct children (empty for a scalar).

    Raises:
        KeyNotFoundError: If nothing is stored there.
    """
    kind = location.resolve_kind()
    if isinstance(kind, BucketKind):
        return KIND_BUCKET, list_entries(kind.bucket, preview_limit)
    if isinstance(kind, RootBucketKind):
        return KIND_ROOT_BUCKET, list_entries(kind.bucket, preview_limit)
    if isinstance(kind, ScalarKind):
        return KIND_SCALAR, []
    raise KeyNotFoundError(f"key not found: {location.describe()}")


def tree_of(location: Location, max_depth: int = UNBOUNDED_DEPTH) -> list[TreeEntry]:
    """Tree listing of the bucket at a location."""
    return walk_tree(_require_bucket(location), max_depth)


def disk_usage_of(location: Location, max_depth: int = UNBOUNDED_DEPTH) -> list[UsageEntry]:
    """Per-bucket disk usage below the bucket at a location."""
    return walk_disk_usage(_require_bucket(location), max_depth)


def copy_value(source: Location, destination: Location) -> int:
    """Copy the scalar at ``source`` to ``destination``.

    The locations may belong to different transactions and databases.

    Returns:
        Number of bytes copied.

    Raises:
        KeyNotFoundError: If ``source`` holds no scalar.
    """
    value = source.get()
    if value is None:
        raise KeyNotFoundError(f"key not found: {source.describe()}")
    destination.put(value)
    return len(value)


def export_value_to_file(source: Location, file_path: str | Path) -> int:
    """Write the scalar at ``source`` into a host file."""
    value = source.get()
    if value is None:
        raise KeyNotFoundError(f"key not found: {source.describe()}")
    target = Path(file_path)
    try:
        target.write_bytes(value)
        target.chmod(EXPORT_FILE_MODE)
    except OSError as error:
        raise HostFileError(f"Failed to write {target}: {error.strerror}.") from error
    return len(value)


def import_value_from_file(file_path: str | Path, destination: Location) -> int:
    """Store the contents of a host file at ``destination``."""
    source = Path(file_path)
    try:
        value = source.read_bytes()
    except OSError as error:
        raise HostFileError(f"Failed to read {source}: {error.strerror}.") from error
    destination.put(value)
    return len(value)


def _require_bucket(location: Location) -> Bucketish:
    kind = location.resolve_kind()
    if isinstance(kind, (BucketKind, RootBucketKind)):
        return kind.bucket
    raise ContainerNotFoundError(f"bucket not found: {location.describe()}")
