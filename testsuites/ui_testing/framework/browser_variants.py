"""
================================================================================
Browser Variants
================================================================================

Catalog of logical browser identities for cross-browser execution.

A variant combines a base engine (chrome, firefox, edge, safari, opera, ie)
with execution-mode flags (headless, remote, mobile, docker) and the
capabilities the combination supports (headless, screenshots, downloads).

Features:
    - Immutable, hashable variants identified by key
    - Case-insensitive resolution with documented fail-open default
    - Base engine lookup (chrome-headless -> chrome)
    - Static category partitions (desktop, mobile, headless, remote, docker)

Usage:
    >>> from testsuites.ui_testing.framework.browser_variants import resolve, base_type
    >>> variant = resolve("Chrome-Headless")
    >>> variant.is_headless
    True
    >>> base_type(variant).key
    'chrome'

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

from loguru import logger

from .exceptions import ConfigurationFallbackWarning


class Engine(str, Enum):
    """Root browser engines."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    SAFARI = "safari"
    OPERA = "opera"
    IE = "ie"


class Category(str, Enum):
    """Static variant partitions used to build execution matrices."""

    DESKTOP = "desktop"
    MOBILE = "mobile"
    HEADLESS = "headless"
    REMOTE = "remote"
    DOCKER = "docker"


@dataclass(frozen=True)
class BrowserVariant:
    """
    Logical browser identity.

    Equality and hashing use the key only; two variants with the same key
    are the same variant.

    Attributes:
        key: Unique identifier (e.g. "chrome-headless")
        display_name: Human-readable name
        engine: Root browser engine
        supports_headless: Engine can run without a display
        supports_screenshots: Screenshots can be captured
        supports_downloads: Download directory can be configured
        headless: Variant always runs headless
        remote: Variant runs on a Selenium Grid / cloud provider
        mobile: Variant emulates a mobile device
        docker: Variant runs in a dockerized grid node
    """

    key: str
    display_name: str = field(compare=False)
    engine: Engine = field(compare=False)
    supports_headless: bool = field(default=False, compare=False)
    supports_screenshots: bool = field(default=False, compare=False)
    supports_downloads: bool = field(default=False, compare=False)
    headless: bool = field(default=False, compare=False)
    remote: bool = field(default=False, compare=False)
    mobile: bool = field(default=False, compare=False)
    docker: bool = field(default=False, compare=False)

    @property
    def is_mobile(self) -> bool:
        return self.mobile

    @property
    def is_remote(self) -> bool:
        """Remote and docker variants are both served by a grid."""
        return self.remote or self.docker

    @property
    def is_headless(self) -> bool:
        return self.headless

    @property
    def is_docker(self) -> bool:
        return self.docker

    def __str__(self) -> str:
        return f"{self.display_name} ({self.key})"


# =============================================================================
# Catalog
# =============================================================================

# Desktop browsers
CHROME = BrowserVariant("chrome", "Google Chrome", Engine.CHROME, True, True, True)
FIREFOX = BrowserVariant("firefox", "Mozilla Firefox", Engine.FIREFOX, True, True, True)
EDGE = BrowserVariant("edge", "Microsoft Edge", Engine.EDGE, True, True, True)
SAFARI = BrowserVariant("safari", "Safari", Engine.SAFARI, False, True, False)  # macOS only
OPERA = BrowserVariant("opera", "Opera", Engine.OPERA, True, True, False)
INTERNET_EXPLORER = BrowserVariant("ie", "Internet Explorer", Engine.IE, False, False, False)

# Mobile browsers
CHROME_MOBILE = BrowserVariant(
    "chrome-mobile", "Chrome Mobile", Engine.CHROME, False, False, False, mobile=True
)
FIREFOX_MOBILE = BrowserVariant(
    "firefox-mobile", "Firefox Mobile", Engine.FIREFOX, False, False, False, mobile=True
)
SAFARI_MOBILE = BrowserVariant(
    "safari-mobile", "Safari Mobile", Engine.SAFARI, False, False, False, mobile=True
)

# Remote/cloud browsers
CHROME_REMOTE = BrowserVariant(
    "chrome-remote", "Chrome (Remote)", Engine.CHROME, True, True, True, remote=True
)
FIREFOX_REMOTE = BrowserVariant(
    "firefox-remote", "Firefox (Remote)", Engine.FIREFOX, True, True, True, remote=True
)
EDGE_REMOTE = BrowserVariant(
    "edge-remote", "Edge (Remote)", Engine.EDGE, True, True, True, remote=True
)
SAFARI_REMOTE = BrowserVariant(
    "safari-remote", "Safari (Remote)", Engine.SAFARI, False, True, False, remote=True
)

# Headless browsers
CHROME_HEADLESS = BrowserVariant(
    "chrome-headless", "Chrome Headless", Engine.CHROME, True, False, True, headless=True
)
FIREFOX_HEADLESS = BrowserVariant(
    "firefox-headless", "Firefox Headless", Engine.FIREFOX, True, False, True, headless=True
)
EDGE_HEADLESS = BrowserVariant(
    "edge-headless", "Edge Headless", Engine.EDGE, True, False, True, headless=True
)

# Docker browsers
CHROME_DOCKER = BrowserVariant(
    "chrome-docker", "Chrome (Docker)", Engine.CHROME, True, True, True, docker=True
)
FIREFOX_DOCKER = BrowserVariant(
    "firefox-docker", "Firefox (Docker)", Engine.FIREFOX, True, True, True, docker=True
)
EDGE_DOCKER = BrowserVariant(
    "edge-docker", "Edge (Docker)", Engine.EDGE, True, True, True, docker=True
)

DEFAULT_VARIANT = CHROME

_DECLARED: Tuple[BrowserVariant, ...] = (
    CHROME, FIREFOX, EDGE, SAFARI, OPERA, INTERNET_EXPLORER,
    CHROME_MOBILE, FIREFOX_MOBILE, SAFARI_MOBILE,
    CHROME_REMOTE, FIREFOX_REMOTE, EDGE_REMOTE, SAFARI_REMOTE,
    CHROME_HEADLESS, FIREFOX_HEADLESS, EDGE_HEADLESS,
    CHROME_DOCKER, FIREFOX_DOCKER, EDGE_DOCKER,
)


def _index(variants: Tuple[BrowserVariant, ...]) -> Dict[str, BrowserVariant]:
    index: Dict[str, BrowserVariant] = {}
    for variant in variants:
        if variant.key in index:
            raise ValueError(f"Duplicate browser variant key: {variant.key}")
        index[variant.key] = variant
    return index


_BY_KEY: Dict[str, BrowserVariant] = _index(_DECLARED)

# Full browser names accepted in configuration files
_ALIASES: Dict[str, BrowserVariant] = {
    "google chrome": CHROME,
    "googlechrome": CHROME,
    "mozilla firefox": FIREFOX,
    "mozillafirefox": FIREFOX,
    "microsoft edge": EDGE,
    "microsoftedge": EDGE,
    "internet explorer": INTERNET_EXPLORER,
    "internetexplorer": INTERNET_EXPLORER,
}

_BASE_TYPES: Dict[Engine, BrowserVariant] = {
    Engine.CHROME: CHROME,
    Engine.FIREFOX: FIREFOX,
    Engine.EDGE: EDGE,
    Engine.SAFARI: SAFARI,
    Engine.OPERA: OPERA,
    Engine.IE: INTERNET_EXPLORER,
}

_CATEGORIES: Dict[Category, Tuple[BrowserVariant, ...]] = {
    Category.DESKTOP: (CHROME, FIREFOX, EDGE, SAFARI, OPERA),
    Category.MOBILE: (CHROME_MOBILE, FIREFOX_MOBILE, SAFARI_MOBILE),
    Category.HEADLESS: (CHROME_HEADLESS, FIREFOX_HEADLESS, EDGE_HEADLESS),
    Category.REMOTE: (CHROME_REMOTE, FIREFOX_REMOTE, EDGE_REMOTE, SAFARI_REMOTE),
    Category.DOCKER: (CHROME_DOCKER, FIREFOX_DOCKER, EDGE_DOCKER),
}


# =============================================================================
# Registry Functions
# =============================================================================

def resolve(identifier: Any) -> BrowserVariant:
    """
    Resolve a browser identifier to a variant.

    Matching is case-insensitive and ignores surrounding whitespace.
    ``None`` or blank input returns DEFAULT_VARIANT. Unknown identifiers
    also return DEFAULT_VARIANT, but log and emit a
    ConfigurationFallbackWarning so a typo in configuration is visible
    without stopping the suite.

    Args:
        identifier: Variant key or full browser name; other values are
                    compared by their string form

    Returns:
        Matching BrowserVariant
    """
    if identifier is None:
        return DEFAULT_VARIANT

    # YAML may hand over ints or lists
    normalized = str(identifier).strip().lower()
    if not normalized:
        return DEFAULT_VARIANT

    variant = _BY_KEY.get(normalized) or _ALIASES.get(normalized)
    if variant is not None:
        return variant

    message = (
        f"Unknown browser '{identifier}', falling back to "
        f"{DEFAULT_VARIANT.display_name}"
    )
    logger.warning(message)
    warnings.warn(message, ConfigurationFallbackWarning, stacklevel=2)
    return DEFAULT_VARIANT


def resolve_many(identifiers: Union[str, Tuple[str, ...], list]) -> Tuple[BrowserVariant, ...]:
    """
    Resolve a comma-separated string or a sequence of identifiers.

    Duplicates are dropped; first occurrence order is kept.
    """
    if isinstance(identifiers, str):
        identifiers = [part for part in identifiers.split(",") if part.strip()]

    resolved: Dict[str, BrowserVariant] = {}
    for identifier in identifiers:
        variant = resolve(identifier)
        resolved.setdefault(variant.key, variant)
    return tuple(resolved.values())


def base_type(variant: BrowserVariant) -> BrowserVariant:
    """
    Get the root variant for a variant's engine (modifiers removed).

    Idempotent: ``base_type(base_type(v)) == base_type(v)``. Engines
    without a root entry return the variant unchanged.
    """
    return _BASE_TYPES.get(variant.engine, variant)


def all_of_category(category: Union[Category, str]) -> Tuple[BrowserVariant, ...]:
    """
    Get the variants in a category, in declaration order.

    Args:
        category: Category member or its name ("desktop", "mobile", ...)

    Raises:
        ValueError: If the category name is unknown
    """
    if not isinstance(category, Category):
        category = Category(str(category).strip().lower())
    return _CATEGORIES[category]


def all_variants() -> Tuple[BrowserVariant, ...]:
    """All registered variants in declaration order."""
    return _DECLARED


__all__ = [
    "Engine",
    "Category",
    "BrowserVariant",
    "DEFAULT_VARIANT",
    "CHROME",
    "FIREFOX",
    "EDGE",
    "SAFARI",
    "OPERA",
    "INTERNET_EXPLORER",
    "CHROME_MOBILE",
    "FIREFOX_MOBILE",
    "SAFARI_MOBILE",
    "CHROME_REMOTE",
    "FIREFOX_REMOTE",
    "EDGE_REMOTE",
    "SAFARI_REMOTE",
    "CHROME_HEADLESS",
    "FIREFOX_HEADLESS",
    "EDGE_HEADLESS",
    "CHROME_DOCKER",
    "FIREFOX_DOCKER",
    "EDGE_DOCKER",
    "resolve",
    "resolve_many",
    "base_type",
    "all_of_category",
    "all_variants",
]
