"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for UI tests. Browser sessions come from the
cross-browser plugin (``browser_session`` / ``browser_variant``); this file
adds the fixtures specific to the UI suite.

Key Features:
- Target application URL
- Cross-browser executor wired to the plugin's factory and registry

================================================================================
"""

import os

import pytest

from crossbrowser_tools.report_tools.allure_utils import AllureReporter
from testsuites.ui_testing.framework import (
    ConfigLoader,
    CrossBrowserExecutor,
    DriverSessionFactory,
    SessionRegistry,
)


@pytest.fixture(scope="session")
def base_url() -> str:
    """Application under test."""
    return os.getenv("UI_BASE_URL", "https://example.com")


@pytest.fixture
def cross_browser_executor(
    cross_browser_config: ConfigLoader,
    driver_factory: DriverSessionFactory,
    session_registry: SessionRegistry,
) -> CrossBrowserExecutor:
    """
    Executor for tests that loop over browsers themselves.

    Reports each variant as an Allure step of the calling test.
    """
    return CrossBrowserExecutor(
        factory=driver_factory,
        registry=session_registry,
        reporter=AllureReporter(),
        config=cross_browser_config,
    )
