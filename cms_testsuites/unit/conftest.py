from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Optional

import httpx
import pytest
from loguru import logger

from cms_testsuites.api_testing.framework.auth_context import AuthContext
from cms_testsuites.api_testing.framework.credential_store import CredentialStore


class DummyConfig:
    """Flat dot-key stand-in for ConfigLoader."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    def get(self, key, default=None):
        return self.data.get(key, default)

    def environment(self):
        return self.data.get("environment", "dev")

    def base_url(self):
        return self.get(f"environments.{self.environment()}.base_url")


TOKENS = {
    "environments.dev.base_url": "http://cms.test",
    "auth.bearer_token": "default-token",
    "auth.admin.bearer_token": "admin-token",
    "auth.editor.bearer_token": "editor-token",
}


@pytest.fixture
def dummy_config() -> DummyConfig:
    return DummyConfig(dict(TOKENS))


@pytest.fixture
def auth(dummy_config: DummyConfig) -> AuthContext:
    return AuthContext(CredentialStore(dummy_config))


@pytest.fixture
def log_messages() -> List[str]:
    """Collect Loguru messages emitted during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


def make_response(
    status_code: int = 200,
    json: Any = None,
    text: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    elapsed_ms: int = 100,
) -> httpx.Response:
    """Build a completed httpx.Response without a network round trip."""
    if json is not None:
        response = httpx.Response(status_code, json=json, headers=headers)
    else:
        response = httpx.Response(status_code, text=text or "", headers=headers)
    response.elapsed = timedelta(milliseconds=elapsed_ms)
    return response
