"""
Repository-level pytest configuration.

Why this exists:
  - Initialize Loguru once per test session with the configured sinks
  - Expose the repository root to fixtures that need `config/`

Important:
  `config/config.yaml` only carries placeholders. Real bearer tokens are
  provided through environment variables (AUTH_BEARER_TOKEN,
  AUTH_ADMIN_BEARER_TOKEN, ...) by the CI pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from cms_testsuites.api_testing.framework.log_config import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _session_logging() -> Generator[None, None, None]:
    """Configure Loguru sinks before the first test runs."""
    init_logger()
    yield
