"""Tests for the configuration store."""

import json
from pathlib import Path

import pytest

from taskman.config import ConfigStore, taskman_home
from taskman.exceptions import AmbiguousNameError, InvalidParameterValueError, UnknownNameError


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture
def config(config_path):
    return ConfigStore(config_path)


def test_defaults(config, config_path):
    assert config.get("list") == "default"
    assert config.get("format") == "text"
    assert config.get("sortorder") is None
    assert not config_path.exists()


def test_set_persists(config, config_path):
    parameter = config.set("sort", "priority-id+")
    assert parameter.name == "sortorder"

    with open(config_path) as f:
        assert json.load(f) == {"sortorder": "priority-id+"}
    assert ConfigStore(config_path).get("sortorder") == "priority-id+"


def test_unset_restores_default(config, config_path):
    config.set("list", "work")
    config.unset("list")
    assert ConfigStore(config_path).get("list") == "default"


@pytest.mark.parametrize("name, value", [
    ("list", "my list"),
    ("list", "2lists"),
    ("sortorder", "priority"),
    ("format", "xml"),
])
def test_invalid_values_are_rejected(config, config_path, name, value):
    with pytest.raises(InvalidParameterValueError):
        config.set(name, value)
    assert not config_path.exists()


def test_unknown_parameter(config):
    with pytest.raises(UnknownNameError):
        config.get("colour")


def test_items(config):
    config.set("format", "json")
    assert config.items() == [("list", "default"), ("sortorder", None), ("format", "json")]


@pytest.mark.parametrize("content", ["{broken", "[1, 2]", "\"list\"", "null"])
def test_unreadable_file_is_ignored(config_path, content, caplog):
    config_path.write_text(content)
    config = ConfigStore(config_path)
    assert config.values == {}
    assert config.get("list") == "default"
    assert "Ignoring unreadable configuration" in caplog.text


def test_home_directory(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKMAN_HOME", str(tmp_path / "env-home"))
    assert taskman_home() == tmp_path / "env-home"
    assert taskman_home(str(tmp_path / "explicit")) == tmp_path / "explicit"

    monkeypatch.delenv("TASKMAN_HOME")
    assert taskman_home() == Path("~/.taskman").expanduser()


def test_prefix_must_be_unique(config):
    # every parameter name is distinct by its first letter
    assert config.resolve_parameter("f").name == "format"
    with pytest.raises(AmbiguousNameError):
        ConfigStore(config.path, config.parameters + config.parameters[:1]).resolve_parameter("l")
