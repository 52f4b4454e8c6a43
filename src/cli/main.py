"""boltnav CLI entry points.

This module exposes gsutil-style commands over mounted bucket databases.
It maps argparse commands onto path resolution and key actions.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from cli.listing_commands import (
    add_listing_commands,
    run_du_command,
    run_ls_command,
    run_tree_command,
)
from core.bolt_uri import is_bolt_uri, parse_mount_flag
from core.config import BoltConfig
from core.errors import BoltError, BoltUriError, BoltUsageError
from core.formatting import format_hex
from core.logging_config import configure_logging
from store.key_actions import (
    copy_value,
    export_value_to_file,
    import_value_from_file,
    make_bucket,
    read_value,
    remove_key,
    write_value,
)
from store.mount_session import MountSession

_DESCRIPTION = """\
boltnav is a tool for manipulating bucket databases, with syntax similar to
Google Cloud Storage's gsutil(1). Keys are addressed with bolt://alias/key/path
URIs; every alias must be mounted with -d/--database "alias:path". When the
alias is omitted, the file basename without ".db" is used.
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="boltnav",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d",
        "--database",
        action="append",
        default=[],
        metavar="[ALIAS:]PATH",
        help="Mount a database file under an alias (repeatable)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("help", help="Show this message")
    _add_key_commands(subparsers)
    add_listing_commands(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the boltnav CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code: 0 on success, 1 on failure, 2 on usage errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "help":
        parser.print_help(sys.stderr)
        return 2
    try:
        config = BoltConfig.from_env()
        configure_logging(config.log_level)
        session = MountSession(config, [parse_mount_flag(raw) for raw in args.database])
        return _dispatch(session, config, args)
    except BoltUsageError as error:
        print(f"{parser.prog}: {error}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2
    except BoltError as error:
        print(error)
        return 1


def _dispatch(session: MountSession, config: BoltConfig, args: argparse.Namespace) -> int:
    if args.command == "touch":
        return _run_touch_command(session, args)
    if args.command == "get":
        return _run_get_command(session, args)
    if args.command == "put":
        return _run_put_command(session, args)
    if args.command == "mkdir":
        return _run_mkdir_command(session, args)
    if args.command == "rm":
        return _run_rm_command(session, args)
    if args.command == "cp":
        return _run_cp_command(session, args)
    if args.command == "ls":
        return run_ls_command(session, config, args)
    if args.command == "tree":
        return run_tree_command(session, args)
    if args.command == "du":
        return run_du_command(session, args)
    raise BoltUsageError(f"unknown command: {args.command}")


def _run_touch_command(session: MountSession, args: argparse.Namespace) -> int:
    """Handle touch command.

    Args:
        session: Mounted databases.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    session.touch(args.alias)
    return 0


def _run_get_command(session: MountSession, args: argparse.Namespace) -> int:
    """Handle get command by printing the value as hex."""
    with session.resolve(args.uri, writable=False) as location:
        print(format_hex(read_value(location)))
    return 0


def _run_put_command(session: MountSession, args: argparse.Namespace) -> int:
    """Handle put command."""
    with session.resolve(args.uri, writable=True) as location:
        write_value(location, args.value.encode("utf-8"))
    return 0


def _run_mkdir_command(session: MountSession, args: argparse.Namespace) -> int:
    """Handle mkdir command."""
    with session.resolve(args.uri, writable=True) as location:
        make_bucket(location, exclusive=args.exclusive)
    return 0


def _run_rm_command(session: MountSession, args: argparse.Namespace) -> int:
    """Handle rm command."""
    with session.resolve(args.uri, writable=True) as location:
        remove_key(location, recursive=args.recurse)
    return 0


def _run_cp_command(session: MountSession, args: argparse.Namespace) -> int:
    """Handle cp command between keys, or between a key and a host file.

    The destination is resolved first so that a copy within one database
    reuses its writable transaction for the read.
    """
    source_is_bolt = is_bolt_uri(args.source)
    destination_is_bolt = is_bolt_uri(args.destination)
    if source_is_bolt and destination_is_bolt:
        with session.resolve(args.destination, writable=True) as destination:
            with session.resolve(args.source, writable=False) as source:
                copy_value(source, destination)
        return 0
    if source_is_bolt:
        with session.resolve(args.source, writable=False) as source:
            export_value_to_file(source, args.destination)
        return 0
    if destination_is_bolt:
        with session.resolve(args.destination, writable=True) as destination:
            import_value_from_file(args.source, destination)
        return 0
    raise BoltUriError("at least one of src and dest must be a <bolt://...> URI")


def _add_key_commands(subparsers: Any) -> None:
    """Register touch, get, put, mkdir, rm, and cp subcommands."""
    touch_parser = subparsers.add_parser("touch", help="Create an empty database file")
    touch_parser.add_argument("alias", help="Mounted database alias")

    get_parser = subparsers.add_parser("get", help="Print a value as hex")
    get_parser.add_argument("uri", help="bolt://alias/key/path")

    put_parser = subparsers.add_parser("put", help="Store a value")
    put_parser.add_argument("uri", help="bolt://alias/key/path")
    put_parser.add_argument("value", help="Value stored as UTF-8 bytes")

    mkdir_parser = subparsers.add_parser("mkdir", help="Create a bucket")
    mkdir_parser.add_argument(
        "-x",
        "--exclusive",
        action="store_true",
        help="Fail when the bucket already exists",
    )
    mkdir_parser.add_argument("uri", help="bolt://alias/key/path")

    rm_parser = subparsers.add_parser("rm", help="Delete a value or bucket")
    rm_parser.add_argument(
        "-r",
        "--recurse",
        action="store_true",
        help="Allow deleting a bucket that is not empty",
    )
    rm_parser.add_argument("uri", help="bolt://alias/key/path")

    cp_parser = subparsers.add_parser("cp", help="Copy a value between keys or files")
    cp_parser.add_argument("source", help="bolt:// URI or host file path")
    cp_parser.add_argument("destination", help="bolt:// URI or host file path")
