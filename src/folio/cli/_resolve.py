"""Build the site from CLI arguments."""

import argparse
import sys

from folio.app import App
from folio.config import AppConfig, load_settings
from folio.errors import ConfigurationError


def build_app(args: argparse.Namespace, config: AppConfig | None = None) -> App:
    """Create the site app, exiting with a message on configuration errors."""
    from folio.site import create_app

    try:
        settings = load_settings(args.env)
        return create_app(config, settings)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
