"""Public SDK surface for boltnav.

This module provides a stable import path for library users.
It re-exports the engine, navigation layer, and traversal helpers.
"""

from __future__ import annotations

from core.config import BoltConfig
from core.types import ListingEntry, MountSpec, TreeEntry, UsageEntry, WritePair
from engine.bucket import Bucket
from engine.database import Database
from engine.transaction import Transaction
from store.bucketish import Bucketish, RootBucket
from store.key_actions import (
    copy_value,
    disk_usage_of,
    make_bucket,
    read_value,
    remove_key,
    tree_of,
    write_value,
)
from store.location import (
    AbsentKind,
    BucketKind,
    Location,
    ResolvedKind,
    RootBucketKind,
    ScalarKind,
)
from store.mount_session import MountSession
from store.navigation import navigate_to_location, resolve_path, split_key_path
from store.traversal import bucket_is_empty, subtree_size, walk_disk_usage, walk_tree

__all__ = [
    "AbsentKind",
    "BoltConfig",
    "Bucket",
    "BucketKind",
    "Bucketish",
    "Database",
    "ListingEntry",
    "Location",
    "MountSession",
    "MountSpec",
    "ResolvedKind",
    "RootBucket",
    "RootBucketKind",
    "ScalarKind",
    "Transaction",
    "TreeEntry",
    "UsageEntry",
    "WritePair",
    "bucket_is_empty",
    "copy_value",
    "disk_usage_of",
    "make_bucket",
    "navigate_to_location",
    "read_value",
    "remove_key",
    "resolve_path",
    "split_key_path",
    "subtree_size",
    "tree_of",
    "walk_disk_usage",
    "walk_tree",
    "write_value",
]
