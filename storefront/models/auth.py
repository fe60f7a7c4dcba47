"""
Domain models for the authenticated storefront session.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthTokens(BaseModel):
    """Credentials issued by the platform, with an absolute expiry instant."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Lifetime in seconds at issue time.")
    expires_at: datetime = Field(
        ..., description="issued_at + expires_in, fixed when the tokens arrive."
    )

    @classmethod
    def from_grant(
        cls,
        payload: Mapping[str, Any],
        *,
        issued_at: datetime,
        fallback_refresh_token: Optional[str] = None,
    ) -> "AuthTokens":
        """Build tokens from a login or refresh payload.

        Raises ``ValueError`` when the payload lacks an access token, a refresh
        token (unless a fallback is supplied) or an expiry.
        """
        access_token = payload.get("access_token")
        refresh_token = payload.get("refresh_token") or fallback_refresh_token
        expires_in = payload.get("expires_in")

        if not access_token or not refresh_token or expires_in in (None, ""):
            raise ValueError("Incomplete token payload returned from the platform.")

        try:
            lifetime = int(expires_in)
        except (TypeError, ValueError) as exc:
            raise ValueError("Token payload carried an unreadable expiry.") from exc
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=payload.get("token_type") or "Bearer",
            expires_in=lifetime,
            expires_at=issued_at + timedelta(seconds=lifetime),
        )

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


class NotificationPreferences(BaseModel):
    email: bool = True
    sms: bool = False
    push: bool = False


class UserPreferences(BaseModel):
    language: str = "ar"
    currency: str = "SAR"
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)


class UserAddress(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    type: Literal["shipping", "billing"]
    is_default: bool = False
    first_name: str
    last_name: str
    company: Optional[str] = None
    address_line_1: str
    address_line_2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: Optional[str] = None


class UserProfile(BaseModel):
    """Platform user plus storefront preferences and saved addresses.

    Fields the platform adds later are kept so the cached copy round-trips.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    preferences: Optional[UserPreferences] = None
    addresses: List[UserAddress] = Field(default_factory=list)
    orders_count: Optional[int] = None
    total_spent: Optional[float] = None
    last_login: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserProfile":
        return cls.model_validate(dict(payload))


__all__ = [
    "AuthTokens",
    "NotificationPreferences",
    "UserAddress",
    "UserPreferences",
    "UserProfile",
]
