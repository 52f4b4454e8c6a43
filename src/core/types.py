"""Shared typed models.

This module defines immutable data models used by the store,
traversal, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WritePair:
    """Key/value pair queued for a batched bucket write.

    Attributes:
        key: Entry key.
        value: Scalar payload.
    """

    key: bytes
    value: bytes

    @classmethod
    def of(cls, key: bytes, value: bytes) -> "WritePair":
        """Build a pair holding private copies of caller buffers."""
        return cls(key=bytes(key), value=bytes(value))


@dataclass(frozen=True)
class ListingEntry:
    """Direct child of a bucket as reported by ``ls``.

    Attributes:
        key: Child key.
        is_bucket: Whether the child is a nested bucket.
        value: Scalar payload when shorter than the preview limit.
        size: Scalar payload length, zero for buckets.
    """

    key: bytes
    is_bucket: bool
    value: bytes | None
    size: int


@dataclass(frozen=True)
class TreeEntry:
    """One line of a tree listing.

    Attributes:
        depth: Nesting depth below the starting bucket.
        key: Entry key.
        is_bucket: Whether the entry is a nested bucket.
    """

    depth: int
    key: bytes
    is_bucket: bool


@dataclass(frozen=True)
class UsageEntry:
    """One bucket of a disk-usage report.

    Attributes:
        depth: Nesting depth below the starting bucket.
        key: Bucket key.
        size: The bucket's own footprint, children excluded.
    """

    depth: int
    key: bytes
    size: int


@dataclass(frozen=True)
class MountSpec:
    """Database file mounted under an alias.

    Attributes:
        alias: Name used as the host part of bolt:// URIs.
        path: Database file path.
    """

    alias: str
    path: str
