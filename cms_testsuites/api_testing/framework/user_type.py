"""User roles known to the CMS, each with its own bearer token."""

from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    """Identity class a request is issued as."""
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def role(self) -> str:
        return self.value

    @property
    def token_key(self) -> str:
        """Configuration key holding this role's bearer token."""
        return f"auth.{self.value}.bearer_token"


__all__ = ["UserType"]
