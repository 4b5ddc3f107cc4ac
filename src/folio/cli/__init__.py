"""folio CLI: dev server, migrations, route listing and password hashing.

Entry point registered as ``folio`` in ``pyproject.toml``::

    [project.scripts]
    folio = "folio.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``folio`` command."""
    parser = argparse.ArgumentParser(
        prog="folio",
        description="folio: a portfolio site with a contact inbox.",
    )
    parser.add_argument("--env", default=".env", help="Settings file (default: .env)")
    parser.add_argument("--log-level", default="info", help="Log level (default: info)")
    subparsers = parser.add_subparsers(dest="command")

    # -- folio run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--debug", action="store_true", help="Reload templates on change")
    run_parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change",
    )

    # -- folio migrate ----------------------------------------------------
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # -- folio routes -----------------------------------------------------
    subparsers.add_parser("routes", help="List registered routes")

    # -- folio hash-password ----------------------------------------------
    subparsers.add_parser(
        "hash-password",
        help="Hash a password for ADMIN_PASSWORD",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from folio._internal.logging import configure_logging

    configure_logging(args.log_level)

    if args.command == "run":
        from folio.cli._run import run_server

        run_server(args)
    elif args.command == "migrate":
        from folio.cli._migrate import run_migrate

        run_migrate(args)
    elif args.command == "routes":
        from folio.cli._routes import run_routes

        run_routes(args)
    elif args.command == "hash-password":
        from folio.cli._passwords import run_hash_password

        run_hash_password(args)
