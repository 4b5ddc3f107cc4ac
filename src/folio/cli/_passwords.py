"""``folio hash-password``: print an argon2 hash for ADMIN_PASSWORD."""

import argparse
import getpass
import sys

from folio.security.passwords import hash_password


def run_hash_password(args: argparse.Namespace) -> None:
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm: "):
        print("Error: passwords do not match.", file=sys.stderr)
        raise SystemExit(1)
    if len(password) < 8:
        print("Error: password must be at least 8 characters.", file=sys.stderr)
        raise SystemExit(1)
    print(hash_password(password))
