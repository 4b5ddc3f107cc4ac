"""Typed async access to a single SQLite database.

SQL in, frozen dataclasses out. Not an ORM.

Connection URL format::

    sqlite:///path/to/db.sqlite    # SQLite file (parent dirs are created)
    sqlite:///:memory:             # In-memory SQLite

One connection is shared by the process and an ``anyio.Lock`` serialises
access to it. Statements inside ``transaction()`` reuse the connection the
transaction holds.

Each query runs start to finish in one anyio worker thread, so the
``sqlite3`` connection is opened with ``check_same_thread=False``.
"""

import logging
import sqlite3
import time
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anyio

from folio.data._mapping import map_row, map_rows
from folio.data.errors import DataError, QueryError

logger = logging.getLogger("folio.data")

# Set inside transaction(); query methods reuse this connection.
_current_conn: ContextVar[sqlite3.Connection] = ContextVar("folio_db_conn")

MEMORY = ":memory:"

type _Step[R] = Callable[[sqlite3.Connection, str, tuple[Any, ...]], R]


def _in_transaction() -> bool:
    try:
        _current_conn.get()
        return True
    except LookupError:
        return False


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False

    @property
    def path(self) -> str:
        return parse_sqlite_path(self.url)


def parse_sqlite_path(url: str) -> str:
    """Extract the file path from a ``sqlite://`` URL.

    ``sqlite:///db/app.sqlite`` gives ``db/app.sqlite`` and
    ``sqlite:////var/app.sqlite`` gives ``/var/app.sqlite``.

    Raises:
        DataError: If the URL is not a sqlite URL.
    """
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            path = url[len(prefix) :]
            if path:
                return path
    msg = f"Unsupported database URL: {url!r}. Expected sqlite:///path or sqlite:///:memory:"
    raise DataError(msg)


class Database:
    """Typed async database access.

    Usage::

        db = Database("sqlite:///database/database.sqlite")

        @dataclass(frozen=True, slots=True)
        class Message:
            id: int
            name: str

        rows = await db.fetch(Message, "SELECT * FROM messages")
        row = await db.fetch_one(Message, "SELECT * FROM messages WHERE id = ?", 42)
        count = await db.fetch_val("SELECT COUNT(*) FROM messages")
        new_id = await db.insert("INSERT INTO messages (name) VALUES (?)", "Ada")

        async with db.transaction():
            await db.execute("UPDATE messages SET read = 1 WHERE id = ?", 1)
            await db.execute("DELETE FROM messages WHERE id = ?", 2)
    """

    __slots__ = ("_async_lock", "_config", "_conn")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._config = DatabaseConfig(url=url, echo=echo)
        parse_sqlite_path(url)
        self._async_lock: anyio.Lock | None = None  # Created lazily inside an event loop
        self._conn: sqlite3.Connection | None = None

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    # -- Connection management --

    def _get_async_lock(self) -> anyio.Lock:
        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        return self._async_lock

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[sqlite3.Connection]:
        """Yield the connection, holding the lock unless a transaction already does."""
        if self._conn is None:
            await self.connect()

        try:
            conn = _current_conn.get()
        except LookupError:
            pass
        else:
            yield conn
            return

        async with self._get_async_lock():
            assert self._conn is not None
            yield self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Execute multiple statements atomically.

        Commits on clean exit, rolls back on exception. A nested
        ``transaction()`` joins the outer one.
        """
        if self._conn is None:
            await self.connect()

        if _in_transaction():
            yield
            return

        async with self._get_async_lock():
            conn = self._conn
            assert conn is not None
            token = _current_conn.set(conn)
            try:
                conn.autocommit = False
                yield
                await anyio.to_thread.run_sync(conn.commit)
            except BaseException:
                await anyio.to_thread.run_sync(conn.rollback)
                raise
            finally:
                conn.autocommit = True
                _current_conn.reset(token)

    # -- Echo / query logging --

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        if not self._config.echo:
            return
        ms = elapsed * 1000
        logger.debug("%6.1fms  %s  params=%r", ms, " ".join(sql.split()), tuple(params))

    async def _run[R](self, step: _Step[R], sql: str, params: tuple[Any, ...]) -> R:
        """Run *step* against the connection in a worker thread."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                return await anyio.to_thread.run_sync(step, conn, sql, params)
            except (sqlite3.Error, OverflowError) as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    # -- Public query API --

    async def fetch[T](self, cls: type[T], sql: str, /, *params: Any) -> list[T]:
        """Execute a query and return all rows as typed dataclasses."""
        return map_rows(cls, await self._run(_select_all, sql, params))

    async def fetch_one[T](self, cls: type[T], sql: str, /, *params: Any) -> T | None:
        """Execute a query and return the first row, or ``None``."""
        row = await self._run(_select_one, sql, params)
        if row is None:
            return None
        return map_row(cls, row)

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Return the first column of the first row (COUNT, MAX, ...), or ``None``."""
        row = await self._run(_select_one, sql, params)
        if row is None:
            return None
        return next(iter(row.values()))

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement (UPDATE/DELETE) and return the rows affected."""
        rowcount, _ = await self._run(_write, sql, params)
        return rowcount

    async def insert(self, sql: str, /, *params: Any) -> int:
        """Execute an INSERT and return the new row's id."""
        _, lastrowid = await self._run(_write, sql, params)
        if lastrowid is None:
            msg = f"Statement did not insert a row: {sql}"
            raise QueryError(msg)
        return lastrowid

    async def execute_script(self, sql: str, /) -> None:
        """Execute several ``;``-separated statements (migrations).

        ``executescript`` commits any pending transaction first.
        """
        await self._run(_script, sql, ())

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection.

        Called automatically on first query. Call explicitly to fail fast at
        startup. Creates the database file's parent directories.
        """
        if self._conn is not None:
            return
        async with self._get_async_lock():
            if self._conn is not None:
                return
            self._conn = await anyio.to_thread.run_sync(_open, self._config.path)
            logger.debug("Connected to %s", self._config.url)

    async def disconnect(self) -> None:
        """Close the connection. Safe to call when not connected."""
        if self._conn is None:
            return
        async with self._get_async_lock():
            if self._conn is None:
                return
            await anyio.to_thread.run_sync(self._conn.close)
            self._conn = None

    # -- Context manager --

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()


# -- Worker-thread steps --


def _open(path: str) -> sqlite3.Connection:
    if path != MEMORY:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, autocommit=True, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    if path != MEMORY:
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def _select_all(
    conn: sqlite3.Connection, sql: str, params: tuple[Any, ...]
) -> list[dict[str, Any]]:
    return [dict(row) for row in conn.execute(sql, params)]


def _select_one(
    conn: sqlite3.Connection, sql: str, params: tuple[Any, ...]
) -> dict[str, Any] | None:
    row = conn.execute(sql, params).fetchone()
    return None if row is None else dict(row)


def _write(conn: sqlite3.Connection, sql: str, params: tuple[Any, ...]) -> tuple[int, int | None]:
    cursor = conn.execute(sql, params)
    return cursor.rowcount, cursor.lastrowid


def _script(conn: sqlite3.Connection, sql: str, _params: tuple[Any, ...]) -> None:
    conn.executescript(sql)
