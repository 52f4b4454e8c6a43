"""Bolt URI and mount flag parsing helpers.

This module centralizes ``bolt://alias/key/path`` parsing and the
``alias:path`` mount syntax so CLI and SDK validate them the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from urllib.parse import unquote, urlsplit

from core.constants import BOLT_URI_SCHEME, DATABASE_FILE_SUFFIX
from core.errors import BoltUriError, BoltUsageError
from core.types import MountSpec


@dataclass(frozen=True)
class BoltUri:
    """Parsed bolt URI model."""

    alias: str
    key_path: str


def is_bolt_uri(raw_uri: str) -> bool:
    """Return whether a string uses the bolt:// scheme."""
    try:
        return urlsplit(raw_uri).scheme == BOLT_URI_SCHEME
    except ValueError:
        return False


def parse_bolt_uri(raw_uri: str) -> BoltUri:
    """Parse and validate a bolt URI.

    Args:
        raw_uri: URI in format ``bolt://alias/key/path``.

    Returns:
        Parsed alias and raw key path.

    Raises:
        BoltUriError: If the value is not a bolt:// URI or names no alias.
    """
    try:
        parts = urlsplit(raw_uri)
    except ValueError as error:
        raise BoltUriError(f"expected <bolt://...> URI, got '{raw_uri}'") from error
    if parts.scheme != BOLT_URI_SCHEME:
        raise BoltUriError(f"expected <bolt://...> URI, got '{raw_uri}'")
    alias = _host_of(parts.netloc)
    if not alias:
        raise BoltUriError(f"alias required in URI '{raw_uri}'")
    return BoltUri(alias=alias, key_path=unquote(parts.path))


def parse_mount_flag(raw_value: str) -> MountSpec:
    """Parse a ``[alias:]path`` database flag.

    When no alias is given, the file basename without ``.db`` is used.

    Raises:
        BoltUsageError: If the database path is empty.
    """
    alias, separator, path = raw_value.partition(":")
    if not separator:
        path = alias
        alias = PurePath(path).name.removesuffix(DATABASE_FILE_SUFFIX)
    if not path:
        raise BoltUsageError(f"database path required in mount '{raw_value}'")
    return MountSpec(alias=alias, path=path)


def _host_of(netloc: str) -> str:
    """Return the host of a URI authority; unlike ``hostname`` it keeps case."""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1:].partition("]")[0]
    return host.partition(":")[0]
