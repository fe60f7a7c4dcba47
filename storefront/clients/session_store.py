"""Key-value stores that keep the session mirror across process restarts."""

from __future__ import annotations

import base64
import hashlib
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Protocol

from cryptography.fernet import Fernet, InvalidToken


class SessionStore(Protocol):
    """Synchronous string key-value storage used for the session mirror."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemorySessionStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)


class SQLiteSessionStore:
    """Durable store backed by a single ``session_values`` table."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS session_values (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM session_values WHERE key = ?", (key,)
            ).fetchone()
        if not row:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO session_values (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )

    def remove(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM session_values WHERE key = ?", (key,))


class EncryptedSessionStore:
    """Encrypt values with a Fernet key derived from a shared secret.

    Values that cannot be decrypted (rotated secret, tampering, legacy
    plaintext) read back as absent.
    """

    def __init__(self, inner: SessionStore, *, secret: str) -> None:
        if not secret:
            raise ValueError("Session encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))
        self._inner = inner

    def get(self, key: str) -> Optional[str]:
        ciphertext = self._inner.get(key)
        if ciphertext is None:
            return None
        try:
            return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
        except InvalidToken:
            return None

    def set(self, key: str, value: str) -> None:
        token = self._fernet.encrypt(value.encode("utf-8"))
        self._inner.set(key, token.decode("utf-8"))

    def remove(self, key: str) -> None:
        self._inner.remove(key)


__all__ = [
    "EncryptedSessionStore",
    "InMemorySessionStore",
    "SQLiteSessionStore",
    "SessionStore",
]
