"""Recursive listings over bucket trees.

Buckets form a strict tree, so traversal needs no visited set. Each walk
carries its depth explicitly and stops when it reaches ``max_depth``;
a negative ``max_depth`` never stops.
"""

from __future__ import annotations

from core.constants import UNBOUNDED_DEPTH
from core.types import ListingEntry, TreeEntry, UsageEntry
from store.bucketish import Bucketish


class _EntryFound(Exception):
    """Stops ``for_each`` at the first entry."""


def bucket_is_empty(bucketish: Bucketish) -> bool:
    """Return whether a bucket has no entries, visiting at most one."""

    def _stop(key: bytes, value: bytes | None) -> None:
        raise _EntryFound

    try:
        bucketish.for_each(_stop)
    except _EntryFound:
        return False
    return True


def list_entries(bucketish: Bucketish, preview_limit: int) -> list[ListingEntry]:
    """Describe the direct children of a bucket.

    Args:
        bucketish: Bucket to list.
        preview_limit: Values shorter than this are included verbatim.

    Returns:
        One entry per child in store order.
    """
    entries: list[ListingEntry] = []

    def _visit(key: bytes, value: bytes | None) -> None:
        if value is None:
            entries.append(ListingEntry(key=key, is_bucket=True, value=None, size=0))
            return
        preview = value if len(value) < preview_limit else None
        entries.append(ListingEntry(key=key, is_bucket=False, value=preview, size=len(value)))

    bucketish.for_each(_visit)
    return entries


def walk_tree(bucketish: Bucketish, max_depth: int = UNBOUNDED_DEPTH) -> list[TreeEntry]:
    """Return every entry below ``bucketish`` in pre-order.

    Args:
        bucketish: Starting bucket; its own entries are at depth 0.
        max_depth: Number of levels to visit; negative for all.

    Returns:
        Tree entries, each bucket immediately followed by its contents.
    """
    entries: list[TreeEntry] = []
    _walk_tree_node(bucketish, 0, max_depth, entries)
    return entries


def _walk_tree_node(
    bucketish: Bucketish,
    depth: int,
    max_depth: int,
    entries: list[TreeEntry],
) -> None:
    if depth == max_depth:
        return

    def _visit(key: bytes, value: bytes | None) -> None:
        if value is not None:
            entries.append(TreeEntry(depth=depth, key=key, is_bucket=False))
            return
        entries.append(TreeEntry(depth=depth, key=key, is_bucket=True))
        child = bucketish.bucket(key)
        if child is not None:
            _walk_tree_node(child, depth + 1, max_depth, entries)

    bucketish.for_each(_visit)


def walk_disk_usage(bucketish: Bucketish, max_depth: int = UNBOUNDED_DEPTH) -> list[UsageEntry]:
    """Report the standalone size of every bucket below ``bucketish``.

    Sizes are per bucket and exclude children; scalars are only counted
    through their parent's size.
    """
    entries: list[UsageEntry] = []
    _walk_usage_node(bucketish, 0, max_depth, entries)
    return entries


def _walk_usage_node(
    bucketish: Bucketish,
    depth: int,
    max_depth: int,
    entries: list[UsageEntry],
) -> None:
    if depth == max_depth:
        return

    def _visit(key: bytes, child: Bucketish) -> None:
        entries.append(UsageEntry(depth=depth, key=key, size=child.standalone_size()))
        _walk_usage_node(child, depth + 1, max_depth, entries)

    bucketish.for_each_bucket(_visit)


def subtree_size(bucketish: Bucketish) -> int:
    """Sum standalone sizes of a bucket and all buckets below it."""
    total = bucketish.standalone_size()
    for entry in walk_disk_usage(bucketish):
        total += entry.size
    return total
