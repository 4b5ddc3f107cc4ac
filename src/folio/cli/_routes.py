"""``folio routes``: list registered routes."""

import argparse

from folio.cli._resolve import build_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / PATH table in match order."""
    app = build_app(args)
    rows = app.routes
    if not rows:
        print("No routes registered.")
        return

    max_method = max(6, *(len(method) for method, _ in rows))
    fmt = f"{{:<{max_method}}}  {{}}"
    print(fmt.format("METHOD", "PATH"))
    print("-" * (max_method + 2 + max(len(path) for _, path in rows)))
    for method, path in rows:
        print(fmt.format(method, path))
