"""
Authoritative holder of the current session tokens and cached profile.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from storefront.clients.session_store import SessionStore
from storefront.core.config import SessionSettings
from storefront.models.auth import AuthTokens, UserProfile

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class TokenStore:
    """Keeps ``AuthTokens`` in memory and mirrors them to a ``SessionStore``.

    The mirror is read once by :meth:`load`; afterwards the in-memory value is
    authoritative and only :meth:`save` and :meth:`clear` change it.
    """

    def __init__(
        self,
        store: SessionStore,
        settings: SessionSettings,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._tokens_key = settings.tokens_key
        self._profile_key = settings.profile_key
        self._margin = timedelta(seconds=settings.expiry_margin_seconds)
        self._clock = clock
        self._tokens: Optional[AuthTokens] = None

    @property
    def tokens(self) -> Optional[AuthTokens]:
        return self._tokens

    @property
    def access_token(self) -> Optional[str]:
        return self._tokens.access_token if self._tokens else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._tokens.refresh_token if self._tokens else None

    def now(self) -> datetime:
        return self._clock()

    def load(self) -> bool:
        """Adopt the persisted tokens if they are still valid.

        Returns whether a session was adopted. An unreadable or expired mirror is
        removed together with the cached profile.
        """
        raw = self._store.get(self._tokens_key)
        if raw is None:
            return False

        try:
            tokens = AuthTokens.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable persisted session tokens")
            self.clear()
            return False

        if not self.is_valid(tokens):
            logger.info(
                "Persisted session expired",
                extra={"expires_at": tokens.expires_at.isoformat()},
            )
            self.clear()
            return False

        self._tokens = tokens
        return True

    def save(self, tokens: AuthTokens) -> None:
        self._tokens = tokens
        self._store.set(self._tokens_key, tokens.model_dump_json())

    def clear(self) -> None:
        """Drop the in-memory tokens and both persisted keys."""
        self._tokens = None
        self._store.remove(self._tokens_key)
        self._store.remove(self._profile_key)

    def is_valid(self, tokens: Optional[AuthTokens]) -> bool:
        """True when ``tokens`` has an access token outside the expiry margin."""
        if tokens is None or not tokens.access_token:
            return False
        return self._clock() < _as_utc(tokens.expires_at) - self._margin

    def is_authenticated(self) -> bool:
        return self.is_valid(self._tokens)

    def expires_within(self, window: timedelta) -> bool:
        """True when the current token expires within ``window`` from now."""
        if self._tokens is None:
            return False
        return _as_utc(self._tokens.expires_at) <= self._clock() + window

    def authorization_header(self) -> Dict[str, str]:
        if self._tokens is None or not self._tokens.access_token:
            return {}
        return {"Authorization": self._tokens.authorization}

    def save_profile(self, profile: UserProfile) -> None:
        self._store.set(self._profile_key, profile.model_dump_json())

    def cached_profile(self) -> Optional[UserProfile]:
        raw = self._store.get(self._profile_key)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            logger.warning("Ignoring unreadable cached user profile")
            return None


__all__ = ["Clock", "TokenStore", "utc_now"]
