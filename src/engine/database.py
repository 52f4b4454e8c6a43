"""Bucket database files.

This module opens SQLite-backed bucket databases and starts transactions.
Readers run concurrently; a writer holds the database write lock from
``begin`` until commit or rollback.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import sqlite3
from typing import Iterator

from core.constants import DEFAULT_BUSY_TIMEOUT_SECONDS, READ_ONLY_URI_SUFFIX
from core.errors import BoltEngineError, DatabaseNotFoundError, NotWritableError
from core.logging_config import get_logger
from engine.schema import SCHEMA_SCRIPT, SELECT_SCHEMA_PRESENT
from engine.transaction import Transaction

_LOGGER = get_logger(__name__)


class Database:
    """Handle to one bucket database file."""

    def __init__(self, path: Path, read_only: bool, busy_timeout: float) -> None:
        self._path = path
        self._read_only = read_only
        self._busy_timeout = busy_timeout
        self._closed = False

    @classmethod
    def open(
        cls,
        path: str | Path,
        read_only: bool = False,
        busy_timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS,
    ) -> "Database":
        """Open a database, creating and initializing it unless read-only.

        Args:
            path: Database file path.
            read_only: Refuse writable transactions and never create the file.
            busy_timeout: Seconds to wait for a locked database.

        Returns:
            Open database handle.

        Raises:
            DatabaseNotFoundError: If a read-only database file does not exist.
            BoltEngineError: If the file cannot be initialized.
        """
        db_path = Path(path).expanduser().resolve()
        if read_only:
            if not db_path.exists():
                raise DatabaseNotFoundError(f"file not found: {db_path}")
        else:
            _initialize_schema(db_path, busy_timeout)
        _LOGGER.info("database_opened", path=str(db_path), read_only=read_only)
        return cls(db_path, read_only, busy_timeout)

    @property
    def path(self) -> Path:
        """Resolved database file path."""
        return self._path

    @property
    def read_only(self) -> bool:
        """Whether only read transactions may be started."""
        return self._read_only

    def begin(self, writable: bool) -> Transaction:
        """Start a transaction; the caller must commit or roll it back.

        Raises:
            NotWritableError: If a writable transaction is requested on a
                read-only database.
            BoltEngineError: If the database is closed or locked.
        """
        if self._closed:
            raise BoltEngineError(f"database {self._path} is closed")
        if writable and self._read_only:
            raise NotWritableError(f"database {self._path} was opened read-only")
        connection = self._connect()
        try:
            connection.execute("BEGIN IMMEDIATE" if writable else "BEGIN")
        except sqlite3.Error as error:
            connection.close()
            raise BoltEngineError(
                f"Failed to begin transaction on {self._path}: {error}. "
                "Another writer may hold the database lock."
            ) from error
        return Transaction(connection, writable)

    @contextmanager
    def view(self) -> Iterator[Transaction]:
        """Run a read-only transaction for the duration of the block."""
        tx = self.begin(writable=False)
        try:
            yield tx
        finally:
            tx.rollback()

    @contextmanager
    def update(self) -> Iterator[Transaction]:
        """Run a writable transaction, committing unless the block raises."""
        tx = self.begin(writable=True)
        try:
            yield tx
        except BaseException:
            tx.rollback()
            raise
        tx.commit()

    def close(self) -> None:
        """Refuse further transactions."""
        self._closed = True

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _connect(self) -> sqlite3.Connection:
        try:
            if self._read_only:
                return sqlite3.connect(
                    self._path.as_uri() + READ_ONLY_URI_SUFFIX,
                    uri=True,
                    timeout=self._busy_timeout,
                    isolation_level=None,
                )
            return sqlite3.connect(
                str(self._path),
                timeout=self._busy_timeout,
                isolation_level=None,
            )
        except sqlite3.Error as error:
            raise BoltEngineError(f"Failed to open {self._path}: {error}.") from error


def _initialize_schema(db_path: Path, busy_timeout: float) -> None:
    """Create the file and bucket tables when missing.

    An initialized file is only read, so opening it never waits on a writer.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        connection = sqlite3.connect(str(db_path), timeout=busy_timeout, isolation_level=None)
    except sqlite3.Error as error:
        raise BoltEngineError(f"Failed to open {db_path}: {error}.") from error
    try:
        if connection.execute(SELECT_SCHEMA_PRESENT).fetchone() is not None:
            return
        connection.executescript(SCHEMA_SCRIPT)
    except sqlite3.Error as error:
        raise BoltEngineError(
            f"Failed to initialize bucket schema in {db_path}: {error}. "
            "The file may not be a boltnav database."
        ) from error
    finally:
        connection.close()
