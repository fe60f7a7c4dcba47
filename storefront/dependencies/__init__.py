"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_auth_session_service,
    get_platform_transport,
    get_refresh_coordinator,
    get_request_executor,
    get_session_keeper,
    get_session_store,
    get_token_store,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_auth_session_service",
    "get_platform_transport",
    "get_refresh_coordinator",
    "get_request_executor",
    "get_session_keeper",
    "get_session_store",
    "get_token_store",
]
