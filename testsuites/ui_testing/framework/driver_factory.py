"""
================================================================================
Driver Session Factory
================================================================================

Browser session creation for cross-browser UI automation.

Features:
    - Local Chrome, Firefox, Edge and Safari sessions
    - Remote sessions on Selenium Grid, docker nodes and cloud providers
    - Baseline stability options applied to every local browser
    - Headless, window size, download and mobile emulation presets
    - Baseline timeouts and best-effort window maximize
    - Memoized remote capabilities keyed by variant and configuration

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import platform
import warnings
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger
from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.safari.options import Options as SafariOptions

from crossbrowser_tools.common import ensure_directory

from .browser_variants import DEFAULT_VARIANT, BrowserVariant, Engine, base_type, resolve
from .capabilities import (
    CAPABILITY_CONFIG_KEYS,
    CapabilitiesDescriptor,
    CapabilityCache,
    build_capabilities,
)
from .config_loader import ConfigLoader
from .driver_provisioner import DriverProvisioner
from .exceptions import (
    ConfigurationFallbackWarning,
    SessionCreationError,
    UnsupportedPlatformError,
)
from .session_handle import SessionHandle


# Default timeouts (seconds)
DEFAULT_IMPLICIT_WAIT = 10
DEFAULT_PAGE_LOAD_TIMEOUT = 30
DEFAULT_SCRIPT_TIMEOUT = 20

DEFAULT_WINDOW_SIZE = "1920,1080"
DEFAULT_DOWNLOAD_DIR = "test-output/downloads"
DEFAULT_MOBILE_DEVICE = "iPhone 12 Pro"
DEFAULT_GRID_URL = "http://localhost:4444/wd/hub"


class DriverSessionFactory:
    """
    Creates WebDriver sessions for browser variants.

    Features:
        - Local vs remote dispatch on the variant's mode
        - Exactly four local builders (chrome, firefox, edge, safari);
          other engines fall back to Chrome with a warning
        - Capability cache shared by all threads using this factory

    Usage:
        factory = DriverSessionFactory()
        session = factory.create_session(resolve("firefox-headless"))
        try:
            session.driver.get("https://example.com")
        finally:
            session.close()
    """

    # Arguments applied to every local Chromium browser
    BASELINE_CHROMIUM_ARGUMENTS: List[str] = [
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--disable-extensions",
        "--disable-infobars",
        "--disable-notifications",
        "--ignore-certificate-errors",
        "--ignore-ssl-errors",
        "--allow-running-insecure-content",
    ]

    # Preferences applied to every local Firefox
    BASELINE_FIREFOX_PREFERENCES: Dict[str, Any] = {
        "layers.acceleration.disabled": True,
        "extensions.update.enabled": False,
        "dom.webnotifications.enabled": False,
        "dom.push.enabled": False,
        "security.tls.insecure_fallback_hosts": "localhost",
        "media.volume_scale": "0.0",
        "browser.download.manager.showWhenStarting": False,
        "browser.helperApps.neverAsk.saveToDisk": (
            "application/pdf,application/octet-stream,text/csv,application/vnd.ms-excel"
        ),
    }

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        provisioner: Optional[DriverProvisioner] = None,
        cache: Optional[CapabilityCache] = None,
        host_system: Callable[[], str] = platform.system,
    ) -> None:
        """
        Initialize the factory.

        Args:
            config: Configuration provider (shared instance if None)
            provisioner: Driver binary resolver for local sessions
            cache: Capability cache (a private one if None)
            host_system: Returns the host OS name ("Darwin", "Linux", ...)
        """
        self.config = config or ConfigLoader.instance()
        self.provisioner = provisioner or DriverProvisioner(
            use_manager=self.config.get_bool("driver.use_manager", True)
        )
        self.cache = cache or CapabilityCache()
        self._host_system = host_system

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, variant: BrowserVariant) -> SessionHandle:
        """
        Create a configured session for a variant.

        Args:
            variant: Browser variant to launch

        Returns:
            Live SessionHandle with baseline timeouts applied

        Raises:
            UnsupportedPlatformError: Engine cannot run on this host
            SessionCreationError: Provisioning, connection or configuration failed
        """
        logger.info(f"Creating WebDriver for browser: {variant.display_name}")

        try:
            if variant.is_remote:
                driver = self.create_remote_driver(variant)
            else:
                driver = self.create_local_driver(variant)
        except (UnsupportedPlatformError, SessionCreationError):
            raise
        except Exception as e:
            logger.error(f"Failed to create WebDriver for {variant.display_name}: {e}")
            raise SessionCreationError(
                f"WebDriver creation failed for {variant.display_name}: {e}",
                variant=variant,
                cause=e,
            ) from e

        session = SessionHandle(driver, variant)

        try:
            session.configure_timeouts(*self.timeouts())
        except Exception as e:
            logger.error(f"Failed to configure timeouts for {variant.display_name}: {e}")
            try:
                session.close()
            except Exception as close_error:
                logger.warning(f"Error while quitting half-configured session: {close_error}")
            raise SessionCreationError(
                f"Timeout configuration failed for {variant.display_name}: {e}",
                variant=variant,
                cause=e,
            ) from e

        self._maximize(session)

        logger.info(f"WebDriver created successfully: {variant.display_name}")
        return session

    def create_local_driver(self, variant: BrowserVariant) -> WebDriver:
        """Dispatch to the local builder for the variant's base engine."""
        engine = base_type(variant).engine

        if engine == Engine.CHROME:
            return self._create_chrome_driver(variant)
        if engine == Engine.FIREFOX:
            return self._create_firefox_driver(variant)
        if engine == Engine.EDGE:
            return self._create_edge_driver(variant)
        if engine == Engine.SAFARI:
            return self._create_safari_driver(variant)

        message = (
            f"Unsupported local browser {variant.display_name}, "
            f"falling back to {DEFAULT_VARIANT.display_name}"
        )
        logger.warning(message)
        warnings.warn(message, ConfigurationFallbackWarning, stacklevel=2)
        return self._create_chrome_driver(DEFAULT_VARIANT)

    def create_remote_driver(self, variant: BrowserVariant) -> WebDriver:
        """Open a session on the configured grid with cached capabilities."""
        grid_url = self._grid_url(variant)
        descriptor = self.get_capabilities(variant)
        options = self._remote_options(variant, descriptor)

        logger.info(f"Connecting to Selenium Grid at: {grid_url}")
        driver = webdriver.Remote(command_executor=grid_url, options=options)
        logger.info(f"Remote WebDriver session created: {driver.session_id}")
        return driver

    # =========================================================================
    # Capabilities
    # =========================================================================

    def get_capabilities(
        self,
        variant: BrowserVariant,
        config: Optional[ConfigLoader] = None,
    ) -> CapabilitiesDescriptor:
        """
        Remote capabilities for a variant, memoized.

        Args:
            variant: Browser variant
            config: Configuration to derive from (factory config if None)

        Returns:
            Cached CapabilitiesDescriptor for (variant key, config fingerprint)
        """
        config = config or self.config
        key = (variant.key, config.fingerprint(CAPABILITY_CONFIG_KEYS))
        return self.cache.get_or_compute(key, lambda: build_capabilities(variant, config))

    def clear_cache(self) -> None:
        self.cache.clear()

    # =========================================================================
    # Local Builders
    # =========================================================================

    def _create_chrome_driver(self, variant: BrowserVariant) -> WebDriver:
        logger.info(f"Setting up Chrome WebDriver: {variant.key}")
        path = self.provisioner.install(Engine.CHROME)

        options = ChromeOptions()
        self._apply_chromium_options(options, variant)
        options.add_argument("--disable-blink-features=AutomationControlled")
        options.add_experimental_option("excludeSwitches", ["enable-automation"])
        options.add_experimental_option("useAutomationExtension", False)

        if variant.is_mobile:
            device = self.config.get("browser.mobile_device", DEFAULT_MOBILE_DEVICE)
            options.add_experimental_option("mobileEmulation", {"deviceName": device})
            logger.info(f"Chrome configured for mobile emulation: {device}")

        service = ChromeService(executable_path=path) if path else ChromeService()
        return webdriver.Chrome(service=service, options=options)

    def _create_firefox_driver(self, variant: BrowserVariant) -> WebDriver:
        logger.info(f"Setting up Firefox WebDriver: {variant.key}")
        path = self.provisioner.install(Engine.FIREFOX)

        options = FirefoxOptions()
        options.accept_insecure_certs = True
        for name, value in self.BASELINE_FIREFOX_PREFERENCES.items():
            options.set_preference(name, value)

        if self._is_headless(variant):
            options.add_argument("-headless")
            logger.info("Firefox running in headless mode")

        size = self._window_size()
        if size:
            options.add_argument(f"--width={size[0]}")
            options.add_argument(f"--height={size[1]}")

        if variant.supports_downloads:
            options.set_preference("browser.download.folderList", 2)
            options.set_preference("browser.download.dir", self._download_dir())

        if variant.is_mobile:
            logger.info("Mobile emulation is Chromium-only; Firefox runs at configured window size")

        service = FirefoxService(executable_path=path) if path else FirefoxService()
        return webdriver.Firefox(service=service, options=options)

    def _create_edge_driver(self, variant: BrowserVariant) -> WebDriver:
        logger.info(f"Setting up Edge WebDriver: {variant.key}")
        path = self.provisioner.install(Engine.EDGE)

        options = EdgeOptions()
        self._apply_chromium_options(options, variant)

        if variant.is_mobile:
            device = self.config.get("browser.mobile_device", DEFAULT_MOBILE_DEVICE)
            options.add_experimental_option("mobileEmulation", {"deviceName": device})

        service = EdgeService(executable_path=path) if path else EdgeService()
        return webdriver.Edge(service=service, options=options)

    def _create_safari_driver(self, variant: BrowserVariant) -> WebDriver:
        logger.info(f"Setting up Safari WebDriver: {variant.key}")

        # Checked before anything Safari-specific is built
        host = self._host_system()
        if host != "Darwin":
            raise UnsupportedPlatformError(variant, "macOS", host or "unknown")

        options = SafariOptions()
        options.automatic_inspection = False
        options.automatic_profiling = False

        if self._is_headless(variant):
            logger.warning("Safari has no headless mode; running with a window")

        return webdriver.Safari(options=options)

    def _apply_chromium_options(self, options: ChromeOptions, variant: BrowserVariant) -> None:
        """Baseline, headless, window size and download settings (Chrome and Edge)."""
        for argument in self.BASELINE_CHROMIUM_ARGUMENTS:
            options.add_argument(argument)
        options.accept_insecure_certs = True

        if self._is_headless(variant):
            options.add_argument("--headless=new")
            logger.info(f"{variant.display_name} running in headless mode")

        window_size = self._window_size()
        if window_size is not None:
            options.add_argument(f"--window-size={window_size[0]},{window_size[1]}")

        if variant.supports_downloads:
            options.add_experimental_option("prefs", {
                "download.default_directory": self._download_dir(),
                "download.prompt_for_download": False,
                "download.directory_upgrade": True,
                "plugins.always_open_pdf_externally": True,
            })

    # =========================================================================
    # Remote Helpers
    # =========================================================================

    def _grid_url(self, variant: BrowserVariant) -> str:
        grid_url = self.config.get("grid.url", DEFAULT_GRID_URL)
        if variant.is_docker:
            return self.config.get("grid.docker_url") or grid_url
        return grid_url

    def _remote_options(self, variant: BrowserVariant, descriptor: CapabilitiesDescriptor):
        engine = base_type(variant).engine
        options_cls = {
            Engine.CHROME: ChromeOptions,
            Engine.FIREFOX: FirefoxOptions,
            Engine.EDGE: EdgeOptions,
            Engine.SAFARI: SafariOptions,
        }.get(engine, ChromeOptions)

        options = options_cls()
        for argument in descriptor.arguments:
            options.add_argument(argument)
        options.browser_version = descriptor.browser_version
        options.platform_name = descriptor.platform_name
        for name, value in descriptor.cloud_provider_extensions.items():
            options.set_capability(name, value)
        return options

    # =========================================================================
    # Settings
    # =========================================================================

    def timeouts(self) -> Tuple[float, float, float]:
        """(implicit wait, page load, script) in seconds."""
        return (
            float(self.config.get("timeouts.implicit_wait", DEFAULT_IMPLICIT_WAIT)),
            float(self.config.get("timeouts.page_load", DEFAULT_PAGE_LOAD_TIMEOUT)),
            float(self.config.get("timeouts.script", DEFAULT_SCRIPT_TIMEOUT)),
        )

    def _is_headless(self, variant: BrowserVariant) -> bool:
        return variant.is_headless or self.config.get_bool("browser.headless")

    def _window_size(self) -> Optional[Tuple[int, int]]:
        raw = str(self.config.get("browser.window_size", DEFAULT_WINDOW_SIZE))
        try:
            width, height = (int(part.strip()) for part in raw.split(","))
        except ValueError:
            logger.warning(f"Invalid browser.window_size '{raw}', using browser default")
            return None
        return width, height

    def _download_dir(self) -> str:
        directory = Path(self.config.get("browser.download_dir", DEFAULT_DOWNLOAD_DIR))
        if not directory.is_absolute():
            directory = Path.cwd() / directory
        return ensure_directory(str(directory))

    def _maximize(self, session: SessionHandle) -> None:
        """Best-effort maximize; skipped for headless and mobile sessions."""
        if self._is_headless(session.variant) or session.variant.is_mobile:
            return
        try:
            session.maximize()
        except Exception as e:
            logger.warning(f"Could not maximize browser window: {e}")


# =============================================================================
# Convenience Functions
# =============================================================================

def create_session(
    identifier: Optional[str] = None,
    config: Optional[ConfigLoader] = None,
) -> SessionHandle:
    """
    Create a session from a browser identifier.

    Args:
        identifier: Variant key or browser name (browser.default if None)
        config: Configuration provider

    Usage:
        session = create_session("chrome-headless")
        session.driver.get("https://example.com")
        session.close()
    """
    config = config or ConfigLoader.instance()
    variant = resolve(identifier or config.get("browser.default"))
    return DriverSessionFactory(config=config).create_session(variant)


__all__ = [
    "DriverSessionFactory",
    "create_session",
    "DEFAULT_IMPLICIT_WAIT",
    "DEFAULT_PAGE_LOAD_TIMEOUT",
    "DEFAULT_SCRIPT_TIMEOUT",
]
