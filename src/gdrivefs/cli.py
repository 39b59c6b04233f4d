"""gdrivefs-setup: store OAuth client config and token in a registry file."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional, Sequence

from gdrivefs.auth import JsonFileRegistry, OAuthClient, setup_credentials
from gdrivefs.config import DEFAULT_SCOPES
from gdrivefs.errors import GDriveFsError


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gdrivefs-setup",
        description="Set up Google Drive access for gdrivefs.",
    )
    parser.add_argument("credentials_file", help="Path to the OAuth client secrets JSON")
    parser.add_argument(
        "--registry",
        default=os.path.join(os.path.expanduser("~"), ".config", "gdrivefs", "registry.json"),
        help="Registry file the credentials and token are written to",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


def _ask(auth_url: str) -> str:
    print("Open the following link in your browser:\n")
    print(auth_url)
    print()
    return input("and enter the verification link: ")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not os.path.isfile(args.credentials_file):
        print(f'File "{args.credentials_file}" does not exist', file=sys.stderr)
        return 1

    try:
        with open(args.credentials_file, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as exc:
        print(f"Could not read credentials: {exc}", file=sys.stderr)
        return 1

    client = OAuthClient(JsonFileRegistry(args.registry))
    try:
        setup_credentials(client, config, DEFAULT_SCOPES, _ask)
    except GDriveFsError as exc:
        print(f"Setup failed: {exc}", file=sys.stderr)
        return 1

    print("Successfully configured!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
