"""Typed async SQLite access for folio.

SQL in, frozen dataclasses out. Not an ORM.

Basic usage::

    from folio.data import Database

    db = Database("sqlite:///database/database.sqlite")
    messages = await db.fetch(Message, "SELECT * FROM messages ORDER BY id DESC")
"""

from folio.data._mapping import map_row, map_rows
from folio.data.database import Database, DatabaseConfig
from folio.data.errors import DataError, MigrationError, QueryError
from folio.data.migrate import MigrationResult, migrate

__all__ = [
    "DataError",
    "Database",
    "DatabaseConfig",
    "MigrationError",
    "MigrationResult",
    "QueryError",
    "map_row",
    "map_rows",
    "migrate",
]
