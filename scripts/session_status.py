"""Inspect or discard the persisted storefront session.

Example usages::

    # Show whether a usable session is stored and when it expires.
    python -m scripts.session_status show --db-path data/session.db

    # Forget the stored tokens and cached profile.
    python -m scripts.session_status clear --db-path data/session.db
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from storefront.clients import EncryptedSessionStore, SessionStore, SQLiteSessionStore
from storefront.core.config import SessionSettings, get_settings
from storefront.services.token_store import TokenStore

EXIT_OK = 0
EXIT_NO_SESSION = 1
EXIT_RUNTIME_ERROR = 5


def _open_token_store(db_path: Path, settings: SessionSettings) -> TokenStore:
    store: SessionStore = SQLiteSessionStore(str(db_path))
    if settings.encryption_secret:
        store = EncryptedSessionStore(store, secret=settings.encryption_secret)
    return TokenStore(store, settings)


def _show(tokens: TokenStore) -> int:
    """Print the state ``load`` would adopt at start-up."""
    if not tokens.load():
        print("No valid session stored.")
        return EXIT_NO_SESSION

    current = tokens.tokens
    if current is None:
        return EXIT_NO_SESSION
    profile = tokens.cached_profile()
    print("Session: authenticated")
    print(f"  token type: {current.token_type}")
    print(f"  expires at: {current.expires_at.isoformat()}")
    print(f"  user:       {profile.id if profile else '(not cached)'}")
    return EXIT_OK


def _clear(tokens: TokenStore) -> int:
    tokens.clear()
    print("Stored session cleared.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect or clear the persisted storefront session."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--db-path",
            default=None,
            type=Path,
            help="Session database (default: SESSION_DB_PATH from settings).",
        )

    show_parser = subparsers.add_parser("show", help="Report the stored session state.")
    add_common_arguments(show_parser)

    clear_parser = subparsers.add_parser("clear", help="Remove stored tokens and profile.")
    add_common_arguments(clear_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings().session
        db_path: Path = args.db_path or Path(settings.db_path)
        tokens = _open_token_store(db_path, settings)
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Could not open session store: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    handlers: dict[str, Callable[[TokenStore], int]] = {
        "show": _show,
        "clear": _clear,
    }
    return handlers[args.command](tokens)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
