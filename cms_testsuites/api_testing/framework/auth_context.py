"""
================================================================================
Authentication Context
================================================================================

Tracks "who am I calling as right now" for each test thread:
    - Per-thread state (threading.local), so parallel tests never see
      each other's role or token
    - Role switching backed by the CredentialStore
    - Explicit token override, clear and reset-to-default
    - Scoped save/mutate/restore helper for tests that tamper with auth

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Optional

from loguru import logger

from .config_loader import ConfigLoader
from .credential_store import CredentialStore, mask_token
from .user_type import UserType


@dataclass
class ExecutionContext:
    """
    Auth state of one execution unit (thread).

    Attributes:
        role: Role the token was derived from, None for explicit tokens
        token: Stored bearer token, None means "use the default"
        cleared: When True, no credential is resolved until the next
                 set_token/set_role/reset
    """
    role: Optional[UserType] = None
    token: Optional[str] = None
    cleared: bool = False


class AuthContext:
    """
    Thread-affine authentication state.

    Every thread gets its own ExecutionContext, created lazily on first
    access. None of the operations raise; absence of a credential is
    represented by None.

    Usage:
        >>> auth = AuthContext.instance()
        >>> auth.set_role(UserType.EDITOR)
        >>> auth.current_token()
        'editor-token'
        >>> with auth.scoped(cleared=True):
        ...     assert auth.current_token() is None
    """

    _instance: Optional["AuthContext"] = None
    _instance_lock = threading.Lock()

    def __init__(self, store: Optional[CredentialStore] = None) -> None:
        self.store = store if store is not None else CredentialStore()
        self._local = threading.local()

    @classmethod
    def instance(cls, config: Optional[ConfigLoader] = None) -> "AuthContext":
        """
        Process-wide AuthContext.

        Args:
            config: ConfigLoader used to build the CredentialStore on first call
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls(CredentialStore(config))
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the process-wide instance (for testing)."""
        cls._instance = None

    @property
    def context(self) -> ExecutionContext:
        """ExecutionContext of the calling thread."""
        ctx = getattr(self._local, "context", None)
        if ctx is None:
            ctx = ExecutionContext()
            self._local.context = ctx
        return ctx

    def set_token(self, token: Optional[str]) -> None:
        """Use an explicit token; drops any role association."""
        ctx = self.context
        ctx.token = token
        ctx.role = None
        ctx.cleared = False
        logger.debug(f"Auth context: explicit token set ({mask_token(token)})")

    def set_role(self, role: UserType) -> None:
        """Switch to ``role`` and store its configured token."""
        ctx = self.context
        ctx.role = role
        ctx.token = self.store.resolve(role)
        ctx.cleared = False
        logger.debug(
            f"Auth context: role set to '{role.role}' ({mask_token(ctx.token)})"
        )

    def current_role(self) -> Optional[UserType]:
        return self.context.role

    def current_token(self) -> Optional[str]:
        """
        Token requests should currently carry.

        Returns None after clear(); otherwise the stored token, falling
        back to the configured default.
        """
        ctx = self.context
        if ctx.cleared:
            return None
        if ctx.token is not None:
            return ctx.token
        return self.store.resolve_default()

    def token_for(self, role: UserType) -> Optional[str]:
        """Token of ``role`` without switching the current identity."""
        return self.store.resolve(role)

    def has_token(self, role: UserType) -> bool:
        token = self.token_for(role)
        return token is not None and token != ""

    def clear(self) -> None:
        """Forget role and token; current_token() yields None until reset."""
        ctx = self.context
        ctx.role = None
        ctx.token = None
        ctx.cleared = True
        logger.debug("Auth context: cleared")

    def reset(self) -> None:
        """Back to the configured default token with no role."""
        ctx = self.context
        ctx.token = self.store.resolve_default()
        ctx.role = None
        ctx.cleared = False
        logger.debug("Auth context: reset to default token")

    def snapshot(self) -> ExecutionContext:
        """Copy of the calling thread's state, for restore()."""
        return replace(self.context)

    def restore(self, saved: ExecutionContext) -> None:
        ctx = self.context
        ctx.role = saved.role
        ctx.token = saved.token
        ctx.cleared = saved.cleared

    @contextmanager
    def scoped(
        self,
        role: Optional[UserType] = None,
        token: Optional[str] = None,
        cleared: bool = False,
    ) -> Iterator["AuthContext"]:
        """
        Temporarily change identity, restoring the previous state on exit.

        Exactly one of ``role``, ``token`` or ``cleared`` is expected;
        with none of them the state is left untouched inside the block.
        """
        saved = self.snapshot()
        try:
            if cleared:
                self.clear()
            elif role is not None:
                self.set_role(role)
            elif token is not None:
                self.set_token(token)
            yield self
        finally:
            self.restore(saved)


__all__ = [
    "AuthContext",
    "ExecutionContext",
]
