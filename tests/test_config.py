# tests/test_config.py
import json

import pytest

from unialias.utils.config_manager import DEFAULTS, Config, app_home


def test_defaults_when_file_missing(tmp_path):
    cfg = Config(str(tmp_path / "settings.json"))
    assert cfg.data == DEFAULTS
    assert not (tmp_path / "settings.json").exists()


def test_set_coerces_and_saves(tmp_path):
    path = tmp_path / "settings.json"
    cfg = Config(str(path))
    cfg.set("max_matches", "8")
    cfg.set("color", "off")
    assert cfg.get("max_matches") == 8
    assert cfg.get("color") is False
    assert json.loads(path.read_text())["max_matches"] == 8
    assert Config(str(path)).get("max_matches") == 8


def test_set_rejects_bad_input(tmp_path):
    cfg = Config(str(tmp_path / "settings.json"))
    with pytest.raises(KeyError):
        cfg.set("hotkey", "x")
    with pytest.raises(ValueError):
        cfg.set("max_matches", "many")


def test_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert Config(str(path)).data == DEFAULTS


def test_unknown_and_bad_keys_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_matches": "x", "theme": "dark", "dataset_dir": "/d"}))
    cfg = Config(str(path))
    assert cfg.get("max_matches") == DEFAULTS["max_matches"]
    assert cfg.get("dataset_dir") == "/d"
    assert "theme" not in cfg.data


def test_log_path_relative_to_settings(tmp_path):
    cfg = Config(str(tmp_path / "settings.json"))
    assert cfg.log_path == str(tmp_path / "unialias.log")
    cfg.data["log_file"] = ""
    assert cfg.log_path is None


def test_app_home_env(monkeypatch, tmp_path):
    monkeypatch.setenv("UNIALIAS_HOME", str(tmp_path))
    assert app_home() == str(tmp_path)
    assert Config().path == str(tmp_path / "settings.json")


def test_metrics_path_off_by_default(tmp_path):
    cfg = Config(str(tmp_path / "settings.json"))
    assert cfg.metrics_path is None
    cfg.set("metrics_file", "metrics.json")
    assert cfg.metrics_path == str(tmp_path / "metrics.json")
