"""
================================================================================
API Testing Pytest Configuration
================================================================================

Fixtures for tests that talk to a running CMS service.

Fixtures:
    - cms_available: Skips the test when the configured base URL is unreachable
    - unique_id: Collision-free suffix for test data

Every test collected under this directory is marked ``requires_external``.

================================================================================
"""

from __future__ import annotations

import uuid

import httpx
import pytest
from loguru import logger

from ..framework import ConfigLoader


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "api_testing" in str(item.fspath):
            item.add_marker(pytest.mark.requires_external)


@pytest.fixture(scope="session")
def cms_reachable(config: ConfigLoader) -> bool:
    """Probe the base URL once per session."""
    base_url = config.base_url()
    if not base_url:
        logger.warning("No base URL configured, live API tests will be skipped")
        return False

    try:
        httpx.get(base_url, timeout=5)
    except httpx.HTTPError as e:
        logger.warning(f"CMS at {base_url} is unreachable: {e}")
        return False
    return True


@pytest.fixture(autouse=True)
def cms_available(cms_reachable: bool) -> None:
    if not cms_reachable:
        pytest.skip("CMS service is not reachable")


@pytest.fixture
def unique_id() -> str:
    """
    Generate unique identifier for test isolation.

    Use this to create test data that won't conflict with other tests
    running in parallel.
    """
    return f"autotest_{uuid.uuid4().hex[:8]}"
