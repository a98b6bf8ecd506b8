"""
Repository-level pytest configuration.

Why this exists:
  - Register the cross-browser plugin for every suite in the repo
  - Keep local runs predictable with safe environment defaults

Important:
  Real grid or cloud credentials belong in CI/CD secrets, never here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

pytest_plugins = ["testsuites.ui_testing.framework.pytest_plugin"]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """
    Set safe environment defaults if not already provided by the user/CI.
    """
    defaults = {
        "UI_BASE_URL": "https://example.com",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
