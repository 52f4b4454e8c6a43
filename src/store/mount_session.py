"""Mounted databases and the transactions currently open on them.

A ``MountSession`` maps aliases to database files and remembers which
alias already has an open transaction, so nested resolutions inside one
command (such as copying between two keys of the same database) reuse it.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from core.config import BoltConfig
from core.bolt_uri import parse_bolt_uri
from core.errors import AliasNotFoundError, NotWritableError
from core.logging_config import get_logger
from core.types import MountSpec
from engine.database import Database
from engine.transaction import Transaction
from store.location import Location
from store.navigation import resolve_path

_LOGGER = get_logger(__name__)


class MountSession:
    """Alias table plus registry of open transactions for one command run."""

    def __init__(self, config: BoltConfig, mounts: Iterable[MountSpec] = ()) -> None:
        self._config = config
        self._mounts: dict[str, str] = {}
        self._tx_handles: dict[str, Transaction] = {}
        for mount in mounts:
            self.mount(mount)

    def mount(self, mount: MountSpec) -> None:
        """Register a database file under an alias, replacing earlier mounts."""
        self._mounts[mount.alias] = mount.path

    def aliases(self) -> tuple[str, ...]:
        """Return mounted aliases in registration order."""
        return tuple(self._mounts)

    def database_path(self, alias: str) -> Path:
        """Return the file mounted under ``alias``.

        Raises:
            AliasNotFoundError: If nothing is mounted under ``alias``.
        """
        if alias not in self._mounts:
            raise AliasNotFoundError(f"alias not found: '{alias}'")
        return Path(self._mounts[alias])

    def touch(self, alias: str) -> Path:
        """Create and initialize the database mounted under ``alias``."""
        db_path = self.database_path(alias)
        with Database.open(db_path, busy_timeout=self._config.busy_timeout) as database:
            return database.path

    @contextmanager
    def transaction(self, alias: str, writable: bool) -> Iterator[Transaction]:
        """Yield a transaction on ``alias``, reusing one that is already open.

        A new writable transaction commits when the block completes and rolls
        back when it raises; a new read-only transaction always rolls back.

        Raises:
            NotWritableError: If the open transaction for ``alias`` is read-only
                and a writable one was requested.
            DatabaseNotFoundError: If a read is requested on a missing file.
        """
        open_tx = self._tx_handles.get(alias)
        if open_tx is not None:
            if writable and not open_tx.writable():
                raise NotWritableError(f"transaction on '{alias}' not writable")
            yield open_tx
            return
        database = Database.open(
            self.database_path(alias),
            read_only=not writable,
            busy_timeout=self._config.busy_timeout,
        )
        with database:
            scope = database.update() if writable else database.view()
            with scope as tx:
                self._tx_handles[alias] = tx
                _LOGGER.debug("transaction_opened", alias=alias, writable=writable)
                try:
                    yield tx
                finally:
                    del self._tx_handles[alias]

    @contextmanager
    def resolve(self, raw_uri: str, writable: bool) -> Iterator[Location]:
        """Yield the location a ``bolt://alias/key/path`` URI points at.

        Args:
            raw_uri: URI naming a mounted alias and a key path.
            writable: Whether the caller will mutate through the location.
        """
        uri = parse_bolt_uri(raw_uri)
        with self.transaction(uri.alias, writable) as tx:
            yield resolve_path(tx, uri.key_path)
