"""Listing command wiring for the boltnav CLI: ls, tree, and du."""

from __future__ import annotations

import argparse
from typing import Any

from core.config import BoltConfig
from core.constants import TREE_INDENT_WIDTH, UNBOUNDED_DEPTH
from core.formatting import format_byte_size, format_hex
from core.types import ListingEntry
from store.key_actions import disk_usage_of, list_location, tree_of
from store.mount_session import MountSession


def add_listing_commands(subparsers: Any) -> None:
    """Register ls, tree, and du subcommands."""
    ls_parser = subparsers.add_parser("ls", help="List direct children of a bucket")
    ls_parser.add_argument("uri", help="bolt://alias/key/path")
    for name, help_text in (
        ("tree", "Print the bucket tree below a location"),
        ("du", "Print per-bucket disk usage below a location"),
    ):
        parser = subparsers.add_parser(name, help=help_text)
        parser.add_argument(
            "-d",
            "--max-depth",
            type=int,
            default=UNBOUNDED_DEPTH,
            help="Levels to descend; negative for unbounded",
        )
        parser.add_argument("uri", help="bolt://alias/key/path")


def run_ls_command(session: MountSession, config: BoltConfig, args: argparse.Namespace) -> int:
    """Print what a location holds and its direct children."""
    with session.resolve(args.uri, writable=False) as location:
        kind_label, entries = list_location(location, config.preview_limit)
        print(f"[is a {kind_label}]")
        for entry in entries:
            print(_format_listing_entry(entry))
    return 0


def run_tree_command(session: MountSession, args: argparse.Namespace) -> int:
    """Print the bucket tree below a location."""
    with session.resolve(args.uri, writable=False) as location:
        for entry in tree_of(location, args.max_depth):
            indent = " " * (entry.depth * TREE_INDENT_WIDTH)
            suffix = "/" if entry.is_bucket else ""
            print(f"{indent}{format_hex(entry.key)}{suffix}")
    return 0


def run_du_command(session: MountSession, args: argparse.Namespace) -> int:
    """Print the standalone size of every bucket below a location."""
    with session.resolve(args.uri, writable=False) as location:
        for entry in disk_usage_of(location, args.max_depth):
            indent = " " * (entry.depth * TREE_INDENT_WIDTH)
            print(f"{indent}{format_hex(entry.key)} = {format_byte_size(entry.size)}")
    return 0


def _format_listing_entry(entry: ListingEntry) -> str:
    key_text = format_hex(entry.key)
    if entry.is_bucket:
        return f"{key_text} (bucket)"
    if entry.value is not None:
        return f"{key_text} = {format_hex(entry.value)}"
    return f"{key_text} = <{entry.size} bytes>"
