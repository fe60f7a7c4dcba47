"""Background loop that keeps an authenticated session fresh."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from enum import Enum

from storefront.core.config import SessionSettings
from storefront.services.auth_session import AuthSessionService
from storefront.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class RenewalOutcome(str, Enum):
    IDLE = "idle"
    VERIFIED = "verified"
    EXTENDED = "extended"
    EXPIRED = "expired"


class SessionKeeper:
    """Periodically verify the session and renew tokens ahead of expiry."""

    def __init__(
        self,
        session: AuthSessionService,
        token_store: TokenStore,
        settings: SessionSettings,
    ) -> None:
        self._session = session
        self._tokens = token_store
        self._interval = settings.renew_interval_seconds
        self._renew_ahead = timedelta(seconds=settings.renew_ahead_seconds)

    async def run_once(self) -> RenewalOutcome:
        if self._session.tokens is None:
            return RenewalOutcome.IDLE

        if self._tokens.expires_within(self._renew_ahead):
            if await self._session.extend_session():
                logger.info("Session renewed ahead of expiry")
                return RenewalOutcome.EXTENDED
            logger.warning("Proactive session renewal failed")

        if await self._session.check_session():
            return RenewalOutcome.VERIFIED

        logger.info("Session no longer valid")
        return RenewalOutcome.EXPIRED

    async def run_forever(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:  # pragma: no cover - keep the loop alive
                logger.exception("Unexpected failure while renewing session")
            await asyncio.sleep(self._interval)


__all__ = ["RenewalOutcome", "SessionKeeper"]
