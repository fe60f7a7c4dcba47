"""Session domain models."""

from .auth import AuthTokens, UserAddress, UserPreferences, UserProfile

__all__ = ["AuthTokens", "UserAddress", "UserPreferences", "UserProfile"]
