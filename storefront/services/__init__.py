"""Service layer exports."""

from .auth_session import AuthEndpoints, AuthSessionService
from .request_executor import ResilientRequestExecutor
from .session_keeper import RenewalOutcome, SessionKeeper
from .token_refresh import RefreshCoordinator
from .token_store import TokenStore

__all__ = [
    "AuthEndpoints",
    "AuthSessionService",
    "RefreshCoordinator",
    "RenewalOutcome",
    "ResilientRequestExecutor",
    "SessionKeeper",
    "TokenStore",
]
