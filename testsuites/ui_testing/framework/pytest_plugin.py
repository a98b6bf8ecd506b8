"""
================================================================================
Cross-Browser Pytest Plugin
================================================================================

Runs browser tests once per selected variant.

Tests that request ``browser_variant`` are parametrized over the variants
selected on the command line (``--browsers`` or ``--browser-category``) or,
failing that, over ``browser.targets`` from configuration. The
``browser_session`` fixture opens a session for the current variant and
yields the worker's WorkerContext.

Usage:
    # conftest.py
    pytest_plugins = ["testsuites.ui_testing.framework.pytest_plugin"]

    # test module
    def test_home_page(browser_session):
        browser_session.driver.get("https://example.com")
        assert browser_session.driver.title

    pytest --browsers chrome-headless,firefox-headless
    pytest --browser-category headless

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Generator, Optional, Tuple

import pytest
from loguru import logger

from crossbrowser_tools.common import init_logger
from crossbrowser_tools.report_tools.allure_utils import attach_png

from .browser_variants import BrowserVariant, all_of_category, resolve, resolve_many
from .config_loader import ConfigLoader
from .driver_factory import DriverSessionFactory
from .exceptions import UnsupportedPlatformError
from .session_registry import SessionRegistry, WorkerContext


# ================================================================================
# Variant Selection
# ================================================================================

def select_variants(
    browsers_option: Optional[str],
    category_option: Optional[str],
    config: ConfigLoader,
) -> Tuple[BrowserVariant, ...]:
    """
    Decide which variants a run covers.

    Priority: explicit ``--browsers`` list, then ``--browser-category``,
    then ``browser.targets``, then ``browser.default``.

    Raises:
        ValueError: If the category name is unknown
    """
    if browsers_option:
        return resolve_many(browsers_option)
    if category_option:
        return all_of_category(category_option)

    targets = config.get_list("browser.targets")
    if targets:
        return resolve_many(targets)
    return (resolve(config.get("browser.default")),)


def open_worker_session(
    variant: BrowserVariant,
    factory: DriverSessionFactory,
    registry: SessionRegistry,
) -> WorkerContext:
    """
    Create a session for a variant and register it for the calling worker.

    Variants that cannot run on this host skip the current test.
    """
    try:
        session = factory.create_session(variant)
    except UnsupportedPlatformError as e:
        pytest.skip(str(e))

    context = registry.context()
    context.set(session)
    return context


# ================================================================================
# Pytest Hooks
# ================================================================================

def pytest_addoption(parser):
    """Register cross-browser command line options."""
    group = parser.getgroup("crossbrowser", "cross-browser execution")
    group.addoption(
        "--browsers",
        action="store",
        default=None,
        help="Comma-separated browser variant keys (e.g. chrome,firefox-headless)",
    )
    group.addoption(
        "--browser-category",
        action="store",
        default=None,
        help="Run every variant of a category: desktop, mobile, headless, remote, docker",
    )


def pytest_configure(config):
    """Set up logging from configuration and register the marker."""
    init_logger(config=ConfigLoader.instance())
    config.addinivalue_line(
        "markers", "cross_browser: test runs once per selected browser variant"
    )


def pytest_generate_tests(metafunc):
    """Parametrize ``browser_variant`` over the selected variants."""
    if "browser_variant" not in metafunc.fixturenames:
        return

    try:
        variants = select_variants(
            metafunc.config.getoption("--browsers"),
            metafunc.config.getoption("--browser-category"),
            ConfigLoader.instance(),
        )
    except ValueError as e:
        raise pytest.UsageError(str(e)) from e

    metafunc.parametrize(
        "browser_variant",
        variants,
        ids=[variant.key for variant in variants],
        scope="function",
    )


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Attach a screenshot to the Allure report when a browser test fails.

    Runs before fixture teardown, so the session is still open.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not report.failed:
        return

    context = getattr(item, "funcargs", {}).get("browser_session")
    if not isinstance(context, WorkerContext) or context.session is None:
        return

    session = context.session
    if session.closed or not session.variant.supports_screenshots:
        return

    try:
        attach_png(session.take_screenshot(), name=f"{session.variant.key}_failure_screenshot")
    except Exception as e:
        logger.warning(f"Failed to capture screenshot on failure: {e}")


# ================================================================================
# Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def cross_browser_config() -> ConfigLoader:
    """Shared configuration for browser sessions."""
    return ConfigLoader.instance()


@pytest.fixture(scope="session")
def driver_factory(cross_browser_config: ConfigLoader) -> DriverSessionFactory:
    """Session-scoped factory, so the capability cache lives for the whole run."""
    return DriverSessionFactory(config=cross_browser_config)


@pytest.fixture(scope="session")
def session_registry() -> Generator[SessionRegistry, None, None]:
    """Registry of live sessions; anything left open is closed at the end."""
    registry = SessionRegistry()
    yield registry
    registry.teardown_all()


@pytest.fixture(scope="function")
def browser_session(
    browser_variant: BrowserVariant,
    driver_factory: DriverSessionFactory,
    session_registry: SessionRegistry,
) -> Generator[WorkerContext, None, None]:
    """Open a session for the current variant and close it after the test."""
    yield open_worker_session(browser_variant, driver_factory, session_registry)
    session_registry.teardown_current()


__all__ = [
    "select_variants",
    "open_worker_session",
    "cross_browser_config",
    "driver_factory",
    "session_registry",
    "browser_session",
]
