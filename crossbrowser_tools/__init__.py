"""
================================================================================
Cross-Browser Tools
================================================================================

Shared infrastructure for the cross-browser test framework.

Modules:
    - common: Logging setup and filesystem helpers
    - report_tools: Reporter sinks and Allure attachment helpers

Example:
    from crossbrowser_tools.common import init_logger
    from crossbrowser_tools.report_tools.allure_utils import AllureReporter

    init_logger(level="DEBUG")
    executor = CrossBrowserExecutor(reporter=AllureReporter())

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
