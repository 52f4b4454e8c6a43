"""Slash-delimited path resolution.

Intermediate segments must name existing buckets; only the final segment
may point at a value, a bucket, or nothing at all.
"""

from __future__ import annotations

from core.constants import KEY_ENCODING, PATH_SEPARATOR
from core.errors import ContainerNotFoundError
from core.formatting import format_hex
from engine.transaction import Transaction
from store.bucketish import Bucketish, RootBucket
from store.location import Location


def split_key_path(path: str) -> list[bytes]:
    """Split a path into byte keys, ignoring empty segments.

    Args:
        path: Path such as ``"/a/b/c"``.

    Returns:
        Ordered UTF-8 encoded segments.
    """
    return [
        segment.encode(KEY_ENCODING)
        for segment in path.split(PATH_SEPARATOR)
        if segment
    ]


def navigate_to_location(root: Bucketish, path: str) -> Location:
    """Walk ``path`` from ``root`` and return a location for its last segment.

    Args:
        root: Bucket the path is relative to, usually a ``RootBucket``.
        path: Slash-delimited key path; empty addresses ``root`` itself.

    Returns:
        Unresolved location of the final segment.

    Raises:
        ContainerNotFoundError: If an intermediate segment is not a bucket.
    """
    keys = split_key_path(path)
    if not keys:
        return Location(root)
    current: Bucketish = root
    for depth, key in enumerate(keys[:-1]):
        child = current.bucket(key)
        if child is None:
            walked = PATH_SEPARATOR.join(format_hex(item) for item in keys[: depth + 1])
            raise ContainerNotFoundError(f"bucket not found: {walked}")
        current = child
    return Location(current, keys[-1])


def resolve_path(tx: Transaction, path: str) -> Location:
    """Resolve ``path`` against the root namespace of ``tx``."""
    return navigate_to_location(RootBucket(tx), path)
