"""Expose the platform transport and session store implementations."""

from .platform_http import JSON_HEADERS, PlatformRequest, PlatformTransport
from .session_store import (
    EncryptedSessionStore,
    InMemorySessionStore,
    SessionStore,
    SQLiteSessionStore,
)

__all__ = [
    "EncryptedSessionStore",
    "InMemorySessionStore",
    "JSON_HEADERS",
    "PlatformRequest",
    "PlatformTransport",
    "SQLiteSessionStore",
    "SessionStore",
]
