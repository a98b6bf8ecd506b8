"""
================================================================================
Remote Capabilities
================================================================================

Capability descriptors for Selenium Grid and cloud providers.

Features:
    - Pure descriptor derivation from (variant, configuration)
    - W3C capability rendering (goog:chromeOptions, moz:firefoxOptions, ...)
    - Cloud provider extensions (BrowserStack, Sauce Labs, LambdaTest)
    - Thread-safe memoization keyed by (variant key, config fingerprint)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import platform
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from .browser_variants import BrowserVariant, Engine, base_type
from .config_loader import ConfigLoader


# Configuration keys that influence a descriptor. The cache key includes a
# fingerprint over these, so changing any of them yields a fresh descriptor.
CAPABILITY_CONFIG_KEYS: Tuple[str, ...] = (
    "browser.headless",
    "grid.platform_name",
    "grid.browser_version",
    "cloud.provider",
    "cloud.project_name",
    "cloud.build_name",
    "cloud.browserstack.os",
    "cloud.browserstack.os_version",
    "cloud.browserstack.local",
    "cloud.browserstack.debug",
    "cloud.saucelabs.max_duration",
    "cloud.saucelabs.command_timeout",
    "cloud.lambdatest.os",
    "cloud.lambdatest.tunnel",
)

# W3C browserName per engine
_BROWSER_NAMES: Dict[Engine, str] = {
    Engine.CHROME: "chrome",
    Engine.FIREFOX: "firefox",
    Engine.EDGE: "MicrosoftEdge",
    Engine.SAFARI: "safari",
}

# Vendor options capability per engine
_OPTIONS_KEYS: Dict[Engine, str] = {
    Engine.CHROME: "goog:chromeOptions",
    Engine.FIREFOX: "moz:firefoxOptions",
    Engine.EDGE: "ms:edgeOptions",
}


@dataclass(frozen=True)
class CapabilitiesDescriptor:
    """
    Remote session request for one variant.

    Attributes:
        browser_name: W3C browserName
        browser_specific_options: Vendor options ({"args": [...]}), empty for Safari
        platform_name: W3C platformName
        browser_version: W3C browserVersion
        cloud_provider_extensions: Provider capability blocks keyed by
                                   capability name ("bstack:options", ...)
    """

    browser_name: str
    browser_specific_options: Dict[str, Any]
    platform_name: str
    browser_version: str
    cloud_provider_extensions: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def arguments(self) -> List[str]:
        return list(self.browser_specific_options.get("args", []))

    def as_capabilities(self) -> Dict[str, Any]:
        """Render as a W3C capabilities dictionary."""
        capabilities: Dict[str, Any] = {
            "browserName": self.browser_name,
            "platformName": self.platform_name,
            "browserVersion": self.browser_version,
        }
        options_key = _options_key_for(self.browser_name)
        if options_key and self.browser_specific_options:
            capabilities[options_key] = dict(self.browser_specific_options)
        capabilities.update(self.cloud_provider_extensions)
        return capabilities


def _options_key_for(browser_name: str) -> Optional[str]:
    for engine, name in _BROWSER_NAMES.items():
        if name == browser_name:
            return _OPTIONS_KEYS.get(engine)
    return None


def host_platform_name() -> str:
    """W3C platform name of the machine running the tests."""
    system = platform.system().lower()

    if system.startswith("win"):
        return "Windows"
    if system == "darwin":
        return "macOS"
    if system == "linux":
        return "Linux"
    return "ANY"


def build_capabilities(variant: BrowserVariant, config: ConfigLoader) -> CapabilitiesDescriptor:
    """
    Derive the remote capabilities for a variant.

    Pure for a fixed variant and fixed configuration values.
    """
    engine = base_type(variant).engine
    headless = variant.is_headless or config.get_bool("browser.headless")

    options: Dict[str, Any] = {}
    if engine in (Engine.CHROME, Engine.EDGE):
        args = ["--no-sandbox", "--disable-dev-shm-usage"]
        if headless:
            args.append("--headless=new")
        options["args"] = args
    elif engine == Engine.FIREFOX:
        options["args"] = ["-headless"] if headless else []

    return CapabilitiesDescriptor(
        browser_name=_BROWSER_NAMES.get(engine, engine.value),
        browser_specific_options=options,
        platform_name=config.get("grid.platform_name") or host_platform_name(),
        browser_version=str(config.get("grid.browser_version", "latest")),
        cloud_provider_extensions=_cloud_extensions(variant, config),
    )


# =============================================================================
# Cloud Providers
# =============================================================================

def _cloud_extensions(variant: BrowserVariant, config: ConfigLoader) -> Dict[str, Dict[str, Any]]:
    provider = str(config.get("cloud.provider", "") or "").strip().lower()
    if not provider:
        return {}

    project = config.get("cloud.project_name", "Cross-Browser Automation")
    build = config.get("cloud.build_name", "Cross-Browser Testing Build")
    session_name = f"{project} - {variant.display_name}"

    if provider == "browserstack":
        return {
            "bstack:options": {
                "os": config.get("cloud.browserstack.os", "Windows"),
                "osVersion": str(config.get("cloud.browserstack.os_version", "11")),
                "projectName": project,
                "buildName": build,
                "sessionName": session_name,
                "local": config.get_bool("cloud.browserstack.local", False),
                "debug": config.get_bool("cloud.browserstack.debug", True),
                "networkLogs": True,
                "consoleLogs": "verbose",
            }
        }

    if provider == "saucelabs":
        return {
            "sauce:options": {
                "name": session_name,
                "build": build,
                "tags": ["cross-browser", variant.key],
                "recordVideo": True,
                "recordScreenshots": True,
                "maxDuration": int(config.get("cloud.saucelabs.max_duration", 3600)),
                "commandTimeout": int(config.get("cloud.saucelabs.command_timeout", 300)),
            }
        }

    if provider == "lambdatest":
        return {
            "LT:Options": {
                "name": session_name,
                "build": build,
                "platformName": config.get("cloud.lambdatest.os", "Windows 11"),
                "video": True,
                "screenshot": True,
                "network": True,
                "console": True,
                "tunnel": config.get_bool("cloud.lambdatest.tunnel", False),
            }
        }

    logger.warning(f"Unknown cloud provider '{provider}', no provider capabilities added")
    return {}


# =============================================================================
# Cache
# =============================================================================

CacheKey = Tuple[str, str]


class CapabilityCache:
    """
    Thread-safe memo of capability descriptors.

    Insert-if-absent: when two threads compute the same key concurrently,
    the first stored descriptor is returned to both. Entries never expire;
    only clear() removes them.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, CapabilitiesDescriptor] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        key: CacheKey,
        compute: Callable[[], CapabilitiesDescriptor],
    ) -> CapabilitiesDescriptor:
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self.hits += 1
                return cached

        descriptor = compute()

        with self._lock:
            stored = self._entries.setdefault(key, descriptor)
            if stored is descriptor:
                self.misses += 1
            else:
                self.hits += 1
        return stored

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.info("Capabilities cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


__all__ = [
    "CAPABILITY_CONFIG_KEYS",
    "CapabilitiesDescriptor",
    "CapabilityCache",
    "build_capabilities",
    "host_platform_name",
]
