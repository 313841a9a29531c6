"""SQLite implementation of the bidirectional link store."""

import asyncio
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple
from urllib.request import pathname2url

from ..errors import StoreError
from ..shortcode import ShortCodeGenerator
from .base import LinkStoreBase
from .models import Link


class SQLiteLinkStore(LinkStoreBase):
    """Link store kept in a single SQLite file.

    The file holds two tables, ``c2u`` (code -> URL) and ``u2c``
    (URL -> code). Writes go through one connection guarded by a lock and
    ``BEGIN IMMEDIATE``, so there is at most one writer at a time. Each
    worker thread reads through its own connection; in WAL mode every
    read transaction sees a committed snapshot while a write is in flight.

    Public coroutine methods run the blocking SQLite work in a thread via
    ``asyncio.to_thread``.
    """

    SCHEMA_SQL = (
        "CREATE TABLE IF NOT EXISTS c2u (code TEXT PRIMARY KEY NOT NULL, url TEXT NOT NULL) WITHOUT ROWID",
        "CREATE TABLE IF NOT EXISTS u2c (url TEXT PRIMARY KEY NOT NULL, code TEXT NOT NULL) WITHOUT ROWID",
    )

    def __init__(
        self,
        db_config: str,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        read_only: bool = False,
        busy_timeout_seconds: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Open the database file.

        Args:
            db_config: Path to the database file (created unless read_only)
            short_code_generator: Source of candidate codes
            read_only: Open with SQLite ``mode=ro``; every write fails
            busy_timeout_seconds: How long to wait on a locked database
            logger: Optional logger instance

        Raises:
            StoreError: If the file cannot be opened or created
        """
        super().__init__(db_config)

        self.logger = logger or logging.getLogger(__name__)
        self.generator = short_code_generator or ShortCodeGenerator()
        self.read_only = read_only
        self.busy_timeout_seconds = busy_timeout_seconds

        self._write_lock = threading.Lock()
        self._local = threading.local()
        self._readers: List[sqlite3.Connection] = []
        self._readers_lock = threading.Lock()
        self._writer: Optional[sqlite3.Connection] = None
        self._closed = False

        if read_only:
            self.logger.debug(f"Opening {db_config} read-only")
            return

        parent = os.path.dirname(os.path.abspath(db_config))
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            raise StoreError(f"cannot create directory {parent}: {e}") from e

        self._writer = self._connect()
        try:
            self._writer.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as e:
            self._writer.close()
            raise StoreError(f"cannot enable WAL on {db_config}: {e}") from e

        self.logger.debug(f"Opened {db_config} for writing")

    def _connect(self, read_only: bool = False) -> sqlite3.Connection:
        """Open a connection in autocommit mode; transactions are explicit."""
        try:
            if read_only:
                uri = f"file:{pathname2url(os.path.abspath(self.db_config))}?mode=ro"
                return sqlite3.connect(
                    uri,
                    uri=True,
                    timeout=self.busy_timeout_seconds,
                    isolation_level=None,
                    check_same_thread=False,
                )
            return sqlite3.connect(
                self.db_config,
                timeout=self.busy_timeout_seconds,
                isolation_level=None,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise StoreError(f"cannot open database {self.db_config}: {e}") from e

    def _reader(self) -> sqlite3.Connection:
        """Get the calling thread's read connection, opening it on first use."""
        if self._closed:
            raise StoreError("link store is closed")

        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = self._connect(read_only=self.read_only)
            self._local.conn = conn
            with self._readers_lock:
                self._readers.append(conn)
        return conn

    def _rollback(self, conn: sqlite3.Connection) -> None:
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            self.logger.warning(f"Rollback failed on {self.db_config}: {e}")

    @contextmanager
    def _transaction(self, conn: sqlite3.Connection, begin: str = "BEGIN"):
        """Run the block as one transaction: commit on success, roll back on any error."""
        try:
            conn.execute(begin)
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback(conn)
            raise StoreError(f"transaction failed on {self.db_config}: {e}") from e
        except BaseException:
            self._rollback(conn)
            raise

    @contextmanager
    def _read_transaction(self):
        with self._transaction(self._reader()) as conn:
            yield conn

    @contextmanager
    def _write_transaction(self):
        if self.read_only:
            raise StoreError(f"link store {self.db_config} is open read-only")

        with self._write_lock:
            # close() may have run while this thread waited on the lock
            if self._closed or self._writer is None:
                raise StoreError("link store is closed")
            with self._transaction(self._writer, begin="BEGIN IMMEDIATE") as conn:
                yield conn

    def ensure_schema_sync(self) -> None:
        """Create the two link tables if missing, in one transaction."""
        self.logger.info(f"Creating link tables in {self.db_config} if not exists...")
        with self._write_transaction() as conn:
            for sql in self.SCHEMA_SQL:
                conn.execute(sql)

    def resolve_sync(self, code: str) -> Optional[str]:
        with self._read_transaction() as conn:
            row = conn.execute(
                "SELECT url FROM c2u WHERE code = ?",
                (code,),
            ).fetchone()
        return row[0] if row else None

    def put_or_reuse_sync(self, canonical_url: str) -> Tuple[str, bool]:
        """Admission protocol; see ``put_or_reuse``."""
        with self._write_transaction() as conn:
            row = conn.execute(
                "SELECT code FROM u2c WHERE url = ?",
                (canonical_url,),
            ).fetchone()
            if row:
                return row[0], False

            code = self.generator.generate()
            while conn.execute("SELECT 1 FROM c2u WHERE code = ?", (code,)).fetchone():
                self.logger.debug(f"Code collision on {code}, drawing again")
                code = self.generator.generate()

            # Last writer wins if two writers ever land on the same code
            conn.execute(
                "INSERT OR REPLACE INTO c2u (code, url) VALUES (?, ?)",
                (code, canonical_url),
            )
            conn.execute(
                "INSERT OR REPLACE INTO u2c (url, code) VALUES (?, ?)",
                (canonical_url, code),
            )

        return code, True

    async def ensure_schema(self) -> None:
        await asyncio.to_thread(self.ensure_schema_sync)

    async def resolve(self, code: str) -> Optional[str]:
        """Get the URL stored for a code.

        Args:
            code: The short code to lookup

        Returns:
            The URL if found, None otherwise

        Raises:
            StoreError: If the lookup could not be performed
        """
        return await asyncio.to_thread(self.resolve_sync, code)

    async def put_or_reuse(self, canonical_url: str) -> Tuple[str, bool]:
        """Return the code for a URL, creating a link if the URL is new.

        Inside one write transaction: reuse the existing code if the URL is
        known, otherwise draw candidate codes until one is free in c2u and
        insert the pair into both tables. The transaction commits as a
        whole or not at all, even if the awaiting task is cancelled.

        Args:
            canonical_url: Already-normalized URL

        Returns:
            Tuple of (code, created) where created is False on reuse

        Raises:
            StoreError: If the transaction failed; nothing was written
        """
        return await asyncio.to_thread(self.put_or_reuse_sync, canonical_url)

    @contextmanager
    def snapshot(self):
        """Open one read transaction and yield ``(count, links)`` from it.

        Both the count and the lazily iterated links come from the same
        committed state, on a dedicated read-only connection. ``links`` is
        only usable inside the ``with`` block.

        Raises:
            StoreError: If the snapshot could not be opened or read
        """
        if self._closed:
            raise StoreError("link store is closed")

        conn = self._connect(read_only=True)
        try:
            with self._transaction(conn) as tx:
                total = tx.execute("SELECT COUNT(*) FROM c2u").fetchone()[0]
                rows = tx.execute("SELECT code, url FROM c2u")
                yield total, (Link(code=code, url=url) for code, url in rows)
        finally:
            conn.close()

    def list_all(self) -> Iterator[Link]:
        """Lazily iterate every link from one read snapshot."""
        with self.snapshot() as (_, links):
            yield from links

    def count(self) -> int:
        with self._read_transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM c2u").fetchone()[0]

    def close(self) -> None:
        """Close the writer and every reader connection."""
        if self._closed:
            return
        self._closed = True

        with self._readers_lock:
            readers, self._readers = self._readers, []
        for conn in readers:
            conn.close()

        if self._writer is not None:
            with self._write_lock:
                self._writer.close()
                self._writer = None

        self.logger.debug(f"Closed link store {self.db_config}")
