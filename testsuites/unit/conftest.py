from typing import List

import pytest
from loguru import logger

from testsuites.ui_testing.framework.config_loader import ConfigLoader


@pytest.fixture(autouse=True)
def _reset_shared_config():
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def make_config(tmp_path):
    """Build a ConfigLoader with no YAML file and the given overrides."""

    def _make(**overrides):
        return ConfigLoader(
            config_path=tmp_path / "missing.yaml",
            overrides={key.replace("__", "."): value for key, value in overrides.items()},
        )

    return _make


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
