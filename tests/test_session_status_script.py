"""Tests for the persisted session inspection script."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from scripts import session_status
from storefront.clients.session_store import SQLiteSessionStore
from storefront.core.config import get_settings
from storefront.models.auth import AuthTokens, UserProfile
from storefront.services.token_store import TokenStore


def _seed(db_path: Path, *, expires_in: int) -> None:
    tokens = TokenStore(SQLiteSessionStore(str(db_path)), get_settings().session)
    tokens.save(
        AuthTokens.from_grant(
            {"access_token": "a", "refresh_token": "r", "expires_in": expires_in},
            issued_at=datetime.now(timezone.utc),
        )
    )
    tokens.save_profile(UserProfile(id="u1"))


def test_show_without_session(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = session_status.main(["show", "--db-path", str(tmp_path / "session.db")])

    assert exit_code == session_status.EXIT_NO_SESSION
    assert "No valid session" in capsys.readouterr().out


def test_show_reports_stored_session(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db_path = tmp_path / "session.db"
    _seed(db_path, expires_in=int(timedelta(hours=1).total_seconds()))

    exit_code = session_status.main(["show", "--db-path", str(db_path)])

    output = capsys.readouterr().out
    assert exit_code == session_status.EXIT_OK
    assert "authenticated" in output
    assert "u1" in output


def test_clear_removes_stored_session(tmp_path: Path) -> None:
    db_path = tmp_path / "session.db"
    _seed(db_path, expires_in=3600)

    assert session_status.main(["clear", "--db-path", str(db_path)]) == session_status.EXIT_OK

    store = SQLiteSessionStore(str(db_path))
    settings = get_settings().session
    assert store.get(settings.tokens_key) is None
    assert store.get(settings.profile_key) is None


def test_requires_command() -> None:
    with pytest.raises(SystemExit):
        session_status.main([])
