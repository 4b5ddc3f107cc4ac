"""Application configuration.

Two layers:

- ``AppConfig``: a frozen dataclass describing how the app runs (server,
  templates, database, sessions). Built in code, immutable after creation.
- ``Settings``: deployment secrets read from a ``.env``-style settings file
  (admin credentials, session secret). Loaded once per process and cached.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from folio.errors import ConfigurationError

_PACKAGE_DIR = Path(__file__).parent


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, database_url="sqlite:///:memory:")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # Security
    secret_key: str = ""
    csrf_rotate_on_get: bool = False

    # Sessions
    session_cookie: str = "folio_session"
    session_max_age: int = 86400  # 24 hours

    # Templates
    template_dir: str | Path = _PACKAGE_DIR / "templates"

    # Static files
    static_dir: str | Path | None = _PACKAGE_DIR / "static"
    static_url: str = "/static"

    # Database
    database_url: str = "sqlite:///database/database.sqlite"
    migrations_dir: str | Path | None = _PACKAGE_DIR / "migrations"


@dataclass(frozen=True, slots=True)
class Settings:
    """Key/value deployment settings.

    Values come from a settings file; process environment variables with the
    same key take precedence.
    """

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the setting for *key*, or *default* if unset."""
        if key in os.environ:
            return os.environ[key]
        return self.values.get(key, default)

    @property
    def admin_email(self) -> str | None:
        return self.get("ADMIN_EMAIL")

    @property
    def admin_password(self) -> str | None:
        return self.get("ADMIN_PASSWORD")

    @property
    def secret_key(self) -> str | None:
        return self.get("SECRET_KEY")


def parse_settings(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines.

    Blank lines, ``#`` comments, and lines without ``=`` are skipped.
    Keys and values are trimmed.
    """
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        name, _, value = line.partition("=")
        values[name.strip()] = value.strip()
    return values


@lru_cache(maxsize=8)
def load_settings(path: str | Path = ".env") -> Settings:
    """Load and cache settings from *path*.

    Raises:
        ConfigurationError: If the settings file does not exist.
    """
    settings_file = Path(path)
    if not settings_file.is_file():
        msg = (
            f"{settings_file} file not found. "
            "Copy .env.example to .env and update the values."
        )
        raise ConfigurationError(msg)
    return Settings(values=parse_settings(settings_file.read_text(encoding="utf-8")))
