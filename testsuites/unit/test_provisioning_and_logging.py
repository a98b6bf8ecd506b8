import sys

import pytest
from loguru import logger

import crossbrowser_tools.common as common
from crossbrowser_tools.common import ensure_directory, init_logger
from testsuites.ui_testing.framework import driver_provisioner
from testsuites.ui_testing.framework.browser_variants import Engine
from testsuites.ui_testing.framework.driver_provisioner import DriverProvisioner


class FakeManager:
    installs = 0

    def install(self):
        FakeManager.installs += 1
        return "/drivers/fakedriver"


@pytest.fixture
def fake_managers(monkeypatch):
    FakeManager.installs = 0
    monkeypatch.setattr(driver_provisioner, "_MANAGERS", {Engine.CHROME: FakeManager})
    return FakeManager


def test_install_is_memoized_per_engine(fake_managers):
    provisioner = DriverProvisioner()

    assert provisioner.install(Engine.CHROME) == "/drivers/fakedriver"
    assert provisioner.install(Engine.CHROME) == "/drivers/fakedriver"
    assert fake_managers.installs == 1


def test_engines_without_manager_use_default_lookup(fake_managers):
    provisioner = DriverProvisioner()

    assert provisioner.install(Engine.SAFARI) is None
    assert DriverProvisioner(use_manager=False).install(Engine.CHROME) is None
    assert fake_managers.installs == 0


@pytest.fixture
def restore_logger(monkeypatch):
    monkeypatch.setattr(common, "_logger_initialized", False)
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_init_logger_writes_file_sink(restore_logger, tmp_path):
    log_file = tmp_path / "logs" / "run.log"

    init_logger(level="debug", log_file=str(log_file))
    logger.debug("file sink ready")
    logger.remove()

    assert "file sink ready" in log_file.read_text(encoding="utf-8")


def test_init_logger_only_configures_once(restore_logger, tmp_path, make_config):
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"

    init_logger(config=make_config(logging__file=str(first)))
    init_logger(log_file=str(second))
    logger.info("hello")
    logger.remove()

    assert "hello" in first.read_text(encoding="utf-8")
    assert not second.exists()


def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_directory(str(target)) == str(target)
    assert target.is_dir()
