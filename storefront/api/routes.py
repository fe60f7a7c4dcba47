"""
FastAPI routes exposing the storefront session to a local frontend.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException

from storefront.core.config import AppSettings
from storefront.core.errors import (
    AuthenticationError,
    PlatformOperationError,
    PlatformTransportError,
    RefreshTokenMissingError,
    StorefrontError,
    TokenRefreshError,
)
from storefront.dependencies import get_app_settings, get_auth_session_service
from storefront.schemas import (
    LoginRequest,
    RegisterRequest,
    SessionStatus,
    SocialLoginRequest,
    UpdateProfileRequest,
)
from storefront.services import AuthSessionService

router = APIRouter()
logger = logging.getLogger(__name__)

SessionService = Annotated[AuthSessionService, Depends(get_auth_session_service)]


def _raise_http(exc: StorefrontError) -> NoReturn:
    """Translate a session error into the matching HTTP response."""
    if isinstance(exc, (AuthenticationError, RefreshTokenMissingError, TokenRefreshError)):
        raise HTTPException(status_code=HTTPStatus.UNAUTHORIZED, detail=str(exc)) from exc
    if isinstance(exc, PlatformOperationError):
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "code": exc.code},
        ) from exc
    if isinstance(exc, PlatformTransportError):
        status = exc.status_code
        if status is None or status >= 500:
            status = HTTPStatus.BAD_GATEWAY
        raise HTTPException(
            status_code=status, detail={"message": exc.message, "code": exc.code}
        ) from exc
    raise HTTPException(status_code=HTTPStatus.INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


def _status(session: AuthSessionService) -> SessionStatus:
    tokens = session.tokens
    authenticated = session.is_authenticated()
    profile = session.cached_profile() if authenticated else None
    return SessionStatus(
        authenticated=authenticated,
        expires_at=tokens.expires_at.isoformat() if tokens and authenticated else None,
        user_id=profile.id if profile else None,
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.get("/session", response_model=SessionStatus)
async def session_status(session: SessionService) -> SessionStatus:
    return _status(session)


@router.post("/session/login", response_model=SessionStatus)
async def login(payload: LoginRequest, session: SessionService) -> SessionStatus:
    try:
        await session.login(payload)
    except StorefrontError as exc:
        _raise_http(exc)
    return _status(session)


@router.post("/session/register", response_model=SessionStatus)
async def register(payload: RegisterRequest, session: SessionService) -> SessionStatus:
    try:
        await session.register(payload)
    except StorefrontError as exc:
        _raise_http(exc)
    return _status(session)


@router.post("/session/social", response_model=SessionStatus)
async def social_login(payload: SocialLoginRequest, session: SessionService) -> SessionStatus:
    try:
        await session.social_login(payload)
    except StorefrontError as exc:
        _raise_http(exc)
    return _status(session)


@router.post("/session/logout", response_model=SessionStatus)
async def logout(session: SessionService) -> SessionStatus:
    try:
        await session.logout()
    except StorefrontError as exc:
        # The local session is gone either way; report the remote failure only.
        logger.warning("Remote logout failed: %s", exc)
    return _status(session)


@router.post("/session/check", response_model=SessionStatus)
async def check_session(session: SessionService) -> SessionStatus:
    await session.check_session()
    return _status(session)


@router.post("/session/extend")
async def extend_session(session: SessionService) -> dict:
    extended = await session.extend_session()
    return {"extended": extended, **_status(session).model_dump()}


@router.get("/session/profile")
async def get_profile(session: SessionService) -> dict[str, Any]:
    if not session.is_authenticated():
        raise HTTPException(status_code=HTTPStatus.UNAUTHORIZED, detail="Not signed in.")
    try:
        profile = await session.get_profile()
    except StorefrontError as exc:
        _raise_http(exc)
    return profile.model_dump(mode="json")


@router.put("/session/profile")
async def update_profile(
    payload: UpdateProfileRequest, session: SessionService
) -> dict[str, Any]:
    if not session.is_authenticated():
        raise HTTPException(status_code=HTTPStatus.UNAUTHORIZED, detail="Not signed in.")
    try:
        profile = await session.update_profile(payload)
    except StorefrontError as exc:
        _raise_http(exc)
    return profile.model_dump(mode="json")


__all__ = ["router"]
