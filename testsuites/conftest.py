"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and provides shared fixtures.

================================================================================
"""

import os
from pathlib import Path

import pytest


def browser_tests_enabled() -> bool:
    return os.getenv("RUN_BROWSER_TESTS", "").lower() in ("1", "true", "yes")


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
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "unit: Browser-free framework tests"
    )
    config.addinivalue_line(
        "markers", "ui: Tests that drive a real browser"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds domain markers by directory and skips browser tests unless
    RUN_BROWSER_TESTS is set.
    """
    run_browsers = browser_tests_enabled()
    skip_browser = pytest.mark.skip(reason="set RUN_BROWSER_TESTS=1 to run browser tests")

    for item in items:
        path = Path(str(item.fspath))

        # Auto-add 'unit' marker to tests in unit directory
        if "unit" in path.parts:
            item.add_marker(pytest.mark.unit)

        # Auto-add 'ui' marker to tests in ui_testing directory
        if "ui_testing" in path.parts:
            item.add_marker(pytest.mark.ui)
            if not run_browsers:
                item.add_marker(skip_browser)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Cross-Browser Automation Testing Framework",
        f"Browser tests: {'enabled' if browser_tests_enabled() else 'disabled'}",
        "=" * 60,
        "",
    ]
