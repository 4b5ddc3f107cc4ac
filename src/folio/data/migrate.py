"""Forward-only SQL migration runner.

Migrations are numbered ``.sql`` files in a directory::

    migrations/
        001_create_messages_table.sql
        002_add_email_index.sql

Applied migrations are tracked in a ``_folio_migrations`` table. Pending
files run in version order; the first failure stops the run.

Usage::

    db = Database("sqlite:///database/database.sqlite")
    result = await migrate(db, "migrations/")
    print(result.summary)
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from folio.data.database import Database
from folio.data.errors import DataError, MigrationError

logger = logging.getLogger("folio.data")

_TRACKING_TABLE = "_folio_migrations"

_CREATE_TRACKING_SQL = f"""
CREATE TABLE IF NOT EXISTS {_TRACKING_TABLE} (
    version    INTEGER PRIMARY KEY,
    name       TEXT    NOT NULL,
    applied_at TEXT    NOT NULL
)
"""


@dataclass(frozen=True, slots=True)
class Migration:
    """A single migration file."""

    version: int
    name: str
    sql: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Result of running migrations."""

    applied: list[str]
    already_applied: int
    total_available: int

    @property
    def summary(self) -> str:
        if not self.applied:
            return f"Already up to date ({self.already_applied} migrations applied)"
        applied_names = ", ".join(self.applied)
        return f"Applied {len(self.applied)} migration(s): {applied_names}"


@dataclass(frozen=True, slots=True)
class _Version:
    version: int


def discover_migrations(directory: str | Path) -> list[Migration]:
    """Parse ``NNN_description.sql`` files from *directory*, sorted by version.

    Raises:
        MigrationError: For a missing directory, a malformed or empty file,
            or a duplicate version number.
    """
    path = Path(directory)
    if not path.is_dir():
        msg = f"Migration directory does not exist: {path}"
        raise MigrationError(msg)

    migrations: list[Migration] = []
    for sql_file in sorted(path.glob("*.sql")):
        name = sql_file.stem
        prefix, sep, _ = name.partition("_")
        if not sep:
            msg = f"Invalid migration filename: {sql_file.name} (expected NNN_description.sql)"
            raise MigrationError(msg)
        try:
            version = int(prefix)
        except ValueError:
            msg = f"Invalid migration version in {sql_file.name}: {prefix!r} is not an integer"
            raise MigrationError(msg) from None

        sql = sql_file.read_text(encoding="utf-8").strip()
        if not sql:
            msg = f"Empty migration file: {sql_file.name}"
            raise MigrationError(msg)

        migrations.append(Migration(version=version, name=name, sql=sql))

    versions = [m.version for m in migrations]
    if len(versions) != len(set(versions)):
        msg = "Duplicate migration version numbers found"
        raise MigrationError(msg)

    return sorted(migrations, key=lambda m: m.version)


async def _apply_migration(db: Database, migration: Migration) -> None:
    await db.execute_script(migration.sql)
    await db.execute(
        f"INSERT INTO {_TRACKING_TABLE} (version, name, applied_at) VALUES (?, ?, ?)",
        migration.version,
        migration.name,
        datetime.now(UTC).isoformat(),
    )


async def migrate(db: Database, directory: str | Path) -> MigrationResult:
    """Apply pending migrations from *directory*.

    Raises:
        MigrationError: If the directory is invalid or a migration fails.
    """
    migrations = discover_migrations(directory)
    await db.execute(_CREATE_TRACKING_SQL)
    applied_versions = {row.version for row in await db.fetch(_Version, f"SELECT version FROM {_TRACKING_TABLE}")}

    applied_names: list[str] = []
    for migration in migrations:
        if migration.version in applied_versions:
            continue
        try:
            await _apply_migration(db, migration)
        except DataError as exc:
            msg = f"Migration {migration.name} failed: {exc}"
            raise MigrationError(msg) from exc
        logger.info("Applied migration %s", migration.name)
        applied_names.append(migration.name)

    return MigrationResult(
        applied=applied_names,
        already_applied=len(applied_versions),
        total_available=len(migrations),
    )
