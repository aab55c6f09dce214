"""
================================================================================
Credential Store
================================================================================

Maps a user role to its bearer token from configuration.

Resolution order for a role:
    1. auth.<role>.bearer_token
    2. auth.bearer_token (process default)
    3. None

Empty strings count as absent. Nothing here raises: a missing credential is
a legitimate state that tests use to exercise 401/403 paths.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .config_loader import ConfigLoader
from .user_type import UserType


DEFAULT_TOKEN_KEY = "auth.bearer_token"


def mask_token(token: Optional[str]) -> str:
    """Short, log-safe representation of a token."""
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"


class CredentialStore:
    """
    Read-only view over the bearer tokens in configuration.

    Safe to share across threads: configuration is loaded once and never
    mutated during a run.
    """

    def __init__(self, config: Optional[ConfigLoader] = None) -> None:
        self.config = config if config is not None else ConfigLoader()

    def resolve_default(self) -> Optional[str]:
        """Process-wide default token, or None if not configured."""
        return self._lookup(DEFAULT_TOKEN_KEY)

    def resolve(self, role: UserType) -> Optional[str]:
        """
        Token for ``role``, falling back to the default token.

        Args:
            role: Role whose credential is wanted

        Returns:
            Bearer token string, or None when neither the role nor the
            default token is configured
        """
        token = self._lookup(role.token_key)
        if token is not None:
            return token

        logger.debug(f"No token configured for role '{role.role}', using default token")
        return self.resolve_default()

    def _lookup(self, key: str) -> Optional[str]:
        value = self.config.get(key)
        if value is None:
            return None
        value = str(value).strip()
        return value or None


__all__ = [
    "CredentialStore",
    "DEFAULT_TOKEN_KEY",
    "mask_token",
]
