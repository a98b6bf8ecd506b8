"""
================================================================================
Framework Exceptions
================================================================================

Error taxonomy for cross-browser session management.

Hierarchy:
    FrameworkError
        ├── SessionCreationError       driver/provisioning/connection failure
        │     └── (cause chained via __cause__)
        ├── UnsupportedPlatformError   engine cannot run on this host OS
        └── TeardownError              close failed (logged, never raised)

    ConfigurationFallbackWarning       a fail-open default was applied

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .browser_variants import BrowserVariant


class FrameworkError(Exception):
    """Base class for all cross-browser framework errors."""
    pass


class SessionCreationError(FrameworkError):
    """
    Raised when a driver session cannot be created.

    Wraps the underlying cause (driver download, grid connection,
    option application) so callers only need to catch one type.
    """

    def __init__(
        self,
        message: str,
        variant: Optional["BrowserVariant"] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.variant = variant
        self.cause = cause


class UnsupportedPlatformError(FrameworkError):
    """Raised when a browser engine cannot run on the host operating system."""

    def __init__(
        self,
        variant: "BrowserVariant",
        required_platform: str,
        actual_platform: str,
    ) -> None:
        super().__init__(
            f"{variant.display_name} requires {required_platform}, "
            f"host platform is {actual_platform}"
        )
        self.variant = variant
        self.required_platform = required_platform
        self.actual_platform = actual_platform


class TeardownError(FrameworkError):
    """
    Describes a failed session close.

    Never raised by the registry; it is logged and returned so callers
    can inspect teardown problems without cleanup ever throwing.
    """

    def __init__(
        self,
        message: str,
        variant: Optional["BrowserVariant"] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.variant = variant
        self.cause = cause


class ConfigurationFallbackWarning(UserWarning):
    """Emitted when an unresolved identifier or engine falls back to a default."""
    pass


__all__ = [
    "FrameworkError",
    "SessionCreationError",
    "UnsupportedPlatformError",
    "TeardownError",
    "ConfigurationFallbackWarning",
]
