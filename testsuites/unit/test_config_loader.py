import pytest
import yaml

from testsuites.ui_testing.framework.config_loader import ConfigLoader, ConfigurationError


def write_config(tmp_path, data):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(data), encoding="utf-8")
    return config_path


def test_env_override_and_defaults(monkeypatch, tmp_path):
    config_path = write_config(tmp_path, {"grid": {"url": "http://grid:4444/wd/hub"}, "timeouts": {"script": 20}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("grid.url") == "http://grid:4444/wd/hub"
    assert loader.get("grid.docker_url", "http://docker:4444") == "http://docker:4444"

    monkeypatch.setenv("GRID_URL", "http://env-grid:4444/wd/hub")
    monkeypatch.setenv("TIMEOUTS_SCRIPT", "45")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("grid.url") == "http://env-grid:4444/wd/hub"
    assert loader.get("timeouts.script", 20) == 45


def test_overrides_win_over_env(monkeypatch, tmp_path):
    monkeypatch.setenv("BROWSER_DEFAULT", "firefox")
    loader = ConfigLoader(config_path=tmp_path / "missing.yaml", overrides={"browser.default": "edge"})
    assert loader.get("browser.default") == "edge"

    loader.set("browser.default", "safari")
    assert loader.get("browser.default") == "safari"


def test_reload_updates_values(tmp_path):
    config_path = write_config(tmp_path, {"timeouts": {"page_load": 5}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("timeouts.page_load") == 5

    config_path.write_text(yaml.dump({"timeouts": {"page_load": 15}}), encoding="utf-8")
    loader.reload()
    assert loader.get("timeouts.page_load") == 15


def test_bool_and_list_values(monkeypatch, tmp_path):
    config_path = write_config(tmp_path, {"browser": {"headless": False, "targets": ["chrome", "firefox"]}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get_bool("browser.headless") is False
    assert loader.get_list("browser.targets") == ["chrome", "firefox"]
    assert loader.get_list("browser.missing") == []

    monkeypatch.setenv("BROWSER_HEADLESS", "yes")
    monkeypatch.setenv("BROWSER_TARGETS", "edge, safari")
    assert loader.get_bool("browser.headless") is True
    assert loader.get_list("browser.targets") == ["edge", "safari"]


def test_fingerprint_tracks_resolved_values(tmp_path):
    keys = ("browser.headless", "cloud.provider")
    first = ConfigLoader(config_path=tmp_path / "missing.yaml", overrides={"browser.headless": True})
    same = ConfigLoader(config_path=tmp_path / "missing.yaml", overrides={"browser.headless": True})
    other = ConfigLoader(config_path=tmp_path / "missing.yaml", overrides={"browser.headless": False})

    assert first.fingerprint(keys) == same.fingerprint(reversed(keys))
    assert first.fingerprint(keys) != other.fingerprint(keys)
    assert len(first.fingerprint(keys)) == 16


def test_invalid_yaml_raises(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("browser: [chrome", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(config_path=config_path)


def test_shared_instance_and_bundled_config():
    shared = ConfigLoader.instance()
    assert ConfigLoader.instance() is shared
    assert shared.get("timeouts.page_load") == 30

    ConfigLoader.reset()
    assert ConfigLoader.instance() is not shared
