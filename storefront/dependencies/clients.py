"""
Factory functions wiring the session components for the API and worker.

This module is the composition root: each component is built once per process
from settings and handed its collaborators explicitly.
"""

from functools import lru_cache

from storefront.clients import (
    EncryptedSessionStore,
    PlatformTransport,
    SessionStore,
    SQLiteSessionStore,
)
from storefront.core.config import get_settings
from storefront.services import (
    AuthSessionService,
    RefreshCoordinator,
    ResilientRequestExecutor,
    SessionKeeper,
    TokenStore,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_session_store() -> SessionStore:
    """Provide the durable session store, encrypted when a secret is configured."""
    settings = _settings().session
    store: SessionStore = SQLiteSessionStore(settings.db_path)
    if settings.encryption_secret:
        store = EncryptedSessionStore(store, secret=settings.encryption_secret)
    return store


@lru_cache()
def get_platform_transport() -> PlatformTransport:
    """Create a singleton platform transport."""
    return PlatformTransport(_settings().platform)


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the token store; the session facade loads it."""
    return TokenStore(get_session_store(), _settings().session)


@lru_cache()
def get_refresh_coordinator() -> RefreshCoordinator:
    return RefreshCoordinator(get_platform_transport(), get_token_store())


@lru_cache()
def get_request_executor() -> ResilientRequestExecutor:
    return ResilientRequestExecutor(
        get_platform_transport(),
        get_token_store(),
        get_refresh_coordinator(),
    )


@lru_cache()
def get_auth_session_service() -> AuthSessionService:
    """Provide the session facade, with the persisted session loaded."""
    service = AuthSessionService(
        executor=get_request_executor(),
        token_store=get_token_store(),
        refresher=get_refresh_coordinator(),
    )
    service.load()
    return service


def get_session_keeper() -> SessionKeeper:
    """Build a renewal worker bound to the shared session facade."""
    return SessionKeeper(
        session=get_auth_session_service(),
        token_store=get_token_store(),
        settings=_settings().session,
    )


__all__ = [
    "get_auth_session_service",
    "get_platform_transport",
    "get_refresh_coordinator",
    "get_request_executor",
    "get_session_keeper",
    "get_session_store",
    "get_token_store",
]
