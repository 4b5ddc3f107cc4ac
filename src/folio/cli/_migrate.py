"""``folio migrate``: apply pending migrations and report."""

import argparse
import sys

import anyio

from folio.cli._resolve import build_app
from folio.data.errors import MigrationError


def run_migrate(args: argparse.Namespace) -> None:
    app = build_app(args)
    db = app.db
    if db is None:
        print("No database configured.", file=sys.stderr)
        raise SystemExit(1)

    async def _migrate() -> None:
        async with db:
            result = await app.migrate()
        print(result.summary if result is not None else "No migrations directory configured.")

    try:
        anyio.run(_migrate)
    except MigrationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
