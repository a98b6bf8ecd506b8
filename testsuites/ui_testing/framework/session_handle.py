"""
================================================================================
Session Handle
================================================================================

Thin wrapper around a live Selenium WebDriver.

The handle is what the rest of the framework passes around: it remembers
which variant it belongs to and which thread created it, and it exposes only
the operations the coordinator needs.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
import time
from typing import Optional

from loguru import logger
from selenium.webdriver.remote.webdriver import WebDriver

from .browser_variants import BrowserVariant


class SessionHandle:
    """
    Live browser session for one variant.

    Usage:
        >>> handle = SessionHandle(driver, CHROME)
        >>> handle.configure_timeouts(10, 30, 20)
        >>> png = handle.take_screenshot()
        >>> handle.close()
    """

    def __init__(self, driver: WebDriver, variant: BrowserVariant) -> None:
        self.driver = driver
        self.variant = variant
        self.owner_thread = threading.get_ident()
        self.created_at = time.time()
        self._closed = False

    @property
    def session_id(self) -> Optional[str]:
        return getattr(self.driver, "session_id", None)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def current_url(self) -> str:
        return self.driver.current_url

    def configure_timeouts(
        self,
        implicit_wait: float,
        page_load: float,
        script: float,
    ) -> None:
        """Apply implicit wait, page-load and script timeouts (seconds)."""
        self.driver.implicitly_wait(implicit_wait)
        self.driver.set_page_load_timeout(page_load)
        self.driver.set_script_timeout(script)

    def maximize(self) -> None:
        self.driver.maximize_window()

    def take_screenshot(self) -> bytes:
        """Capture the viewport as PNG bytes."""
        return self.driver.get_screenshot_as_png()

    def close(self) -> None:
        """
        Quit the driver.

        Idempotent. The handle counts as closed even when quit() raises,
        so a failed close is never retried against a dead session.
        """
        if self._closed:
            return
        self._closed = True
        logger.debug(f"Quitting session {self.session_id} ({self.variant.key})")
        self.driver.quit()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "live"
        return f"<SessionHandle {self.variant.key} {self.session_id} {state}>"


__all__ = [
    "SessionHandle",
]
