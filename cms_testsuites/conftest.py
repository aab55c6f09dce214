"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers project-wide markers and provides the fixtures resource clients and
test cases build on:
    - config: Configuration loader instance
    - auth_context: Per-thread auth state, reset after every test
    - spec_factory: Request template factory
    - http_client: Template dispatcher with an open httpx session

================================================================================
"""

from __future__ import annotations

from typing import Generator

import allure
import pytest

from cms_testsuites.api_testing.framework import (
    AuthContext,
    ConfigLoader,
    HttpClient,
    RequestSpecFactory,
)


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line("markers", "smoke: Quick verification tests")
    config.addinivalue_line("markers", "regression: Full regression test suite")
    config.addinivalue_line("markers", "unit: Framework unit tests, no network")

    # Domain markers
    config.addinivalue_line("markers", "api: API-specific tests")
    config.addinivalue_line("markers", "auth: Tests related to authentication")
    config.addinivalue_line(
        "markers", "requires_external: Tests requiring a running CMS service"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests by directory."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        if "api_testing" in str(item.fspath):
            item.add_marker(pytest.mark.api)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "CMS API Automation Harness",
        "=" * 60,
        "",
    ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    """
    Provide configuration loader instance.

    Session-scoped to ensure configuration is loaded only once.
    """
    return ConfigLoader()


@pytest.fixture
def auth_context(config: ConfigLoader) -> Generator[AuthContext, None, None]:
    """
    Provide the auth context, restored to the default token afterwards.

    Usage:
        def test_unauthorized(auth_context, spec_factory, http_client):
            auth_context.clear()
            response = http_client.get(spec_factory.for_current_user(), "/api/v1/journeys")
            assert_status_in(response, 401, 403)
    """
    auth = AuthContext.instance(config)
    auth.reset()
    yield auth
    auth.reset()


@pytest.fixture
def spec_factory(config: ConfigLoader, auth_context: AuthContext) -> RequestSpecFactory:
    return RequestSpecFactory(config, auth_context)


@pytest.fixture
def http_client(config: ConfigLoader) -> Generator[HttpClient, None, None]:
    """Open HttpClient session for the duration of one test."""
    with HttpClient(config) as client:
        yield client


# =============================================================================
# Allure Reporting Hooks
# =============================================================================

def pytest_exception_interact(node, call, report):
    """Attach additional info on test failure."""
    if report.failed:
        allure.attach(
            str(call.excinfo.value),
            name="Error Details",
            attachment_type=allure.attachment_type.TEXT
        )
