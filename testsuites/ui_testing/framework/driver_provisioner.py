"""
================================================================================
Driver Provisioner
================================================================================

Resolves local driver binaries (chromedriver, geckodriver, msedgedriver)
with webdriver-manager before a local session is launched.

Install paths are memoized per engine for the life of the provisioner, so a
matrix run downloads each driver at most once.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from typing import Dict, Optional

from loguru import logger
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager
from webdriver_manager.microsoft import EdgeChromiumDriverManager

from .browser_variants import Engine


_MANAGERS = {
    Engine.CHROME: ChromeDriverManager,
    Engine.FIREFOX: GeckoDriverManager,
    Engine.EDGE: EdgeChromiumDriverManager,
}


class DriverProvisioner:
    """
    Local driver binary resolver.

    Usage:
        >>> provisioner = DriverProvisioner()
        >>> path = provisioner.install(Engine.CHROME)
        >>> service = ChromeService(executable_path=path)

    ``install`` returns None when no download is needed: Safari ships
    safaridriver with the OS, and ``use_manager=False`` leaves resolution
    to Selenium Manager.
    """

    def __init__(self, use_manager: bool = True) -> None:
        self.use_manager = use_manager
        self._paths: Dict[Engine, str] = {}
        self._lock = threading.Lock()

    def install(self, engine: Engine) -> Optional[str]:
        """
        Resolve the driver binary for an engine.

        Args:
            engine: Browser engine

        Returns:
            Executable path, or None to use the default lookup

        Raises:
            Whatever webdriver-manager raises on download failure; the
            session factory wraps it in SessionCreationError.
        """
        manager_cls = _MANAGERS.get(engine)
        if manager_cls is None or not self.use_manager:
            return None

        with self._lock:
            if engine in self._paths:
                return self._paths[engine]

            logger.debug(f"Installing driver binary for {engine.value}")
            path = manager_cls().install()
            self._paths[engine] = path
            logger.info(f"Driver for {engine.value} ready: {path}")
            return path


__all__ = [
    "DriverProvisioner",
]
