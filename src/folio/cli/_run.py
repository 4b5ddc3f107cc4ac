"""``folio run``: serve the site with uvicorn."""

import argparse
from dataclasses import replace

from folio.cli._resolve import build_app
from folio.config import AppConfig


def run_server(args: argparse.Namespace) -> None:
    """Start uvicorn.

    With ``--reload`` uvicorn imports the app factory itself so it can
    restart the worker, which means settings come from the default
    ``.env`` in the working directory.
    """
    defaults = AppConfig()
    config = replace(
        defaults,
        host=args.host or defaults.host,
        port=args.port or defaults.port,
        debug=args.debug,
        log_level=args.log_level,
    )

    if args.reload:
        import uvicorn

        uvicorn.run(
            "folio.site:create_app",
            factory=True,
            host=config.host,
            port=config.port,
            reload=True,
            log_level=config.log_level,
        )
        return

    app = build_app(args, config)
    app.run()
