"""Data layer error hierarchy."""

from folio.errors import FolioError


class DataError(FolioError):
    """Base for all folio.data errors."""


class QueryError(DataError):
    """Raised when a SQL statement fails."""


class MigrationError(DataError):
    """Raised when a migration file is invalid or fails to apply."""
