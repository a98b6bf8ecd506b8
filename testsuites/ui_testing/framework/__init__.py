"""
================================================================================
UI Testing Framework
================================================================================

Selenium-based cross-browser execution framework.

Components:
    - browser_variants: Browser variant catalog and identifier resolution
    - driver_factory: WebDriver session creation (local, grid, cloud)
    - capabilities: Remote capabilities and their cache
    - session_registry: Per-worker session ownership
    - execution_coordinator: Runs a procedure across browser variants
    - execution_result: Outcomes, summary and compatibility matrix

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_variants import (
    DEFAULT_VARIANT,
    BrowserVariant,
    Category,
    Engine,
    all_of_category,
    all_variants,
    base_type,
    resolve,
    resolve_many,
)
from .capabilities import CapabilitiesDescriptor, CapabilityCache
from .config_loader import ConfigLoader, ConfigurationError
from .driver_factory import DriverSessionFactory, create_session
from .exceptions import (
    ConfigurationFallbackWarning,
    FrameworkError,
    SessionCreationError,
    TeardownError,
    UnsupportedPlatformError,
)
from .execution_coordinator import CrossBrowserExecutor
from .execution_result import ErrorInfo, ExecutionResult, ExecutionStatus, VariantOutcome
from .session_handle import SessionHandle
from .session_registry import SessionRegistry, WorkerContext

__all__ = [
    "DEFAULT_VARIANT",
    "BrowserVariant",
    "Category",
    "Engine",
    "all_of_category",
    "all_variants",
    "base_type",
    "resolve",
    "resolve_many",
    "CapabilitiesDescriptor",
    "CapabilityCache",
    "ConfigLoader",
    "ConfigurationError",
    "DriverSessionFactory",
    "create_session",
    "ConfigurationFallbackWarning",
    "FrameworkError",
    "SessionCreationError",
    "TeardownError",
    "UnsupportedPlatformError",
    "CrossBrowserExecutor",
    "ErrorInfo",
    "ExecutionResult",
    "ExecutionStatus",
    "VariantOutcome",
    "SessionHandle",
    "SessionRegistry",
    "WorkerContext",
]
