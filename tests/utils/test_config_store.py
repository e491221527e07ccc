"""
Unit tests for utils/config_store.py
"""

import json

import pytest

from mo_agent.utils.config import ConfigError
from mo_agent.utils.config_store import ConfigStore


class TestConfigStore:
    """Tests for loading and persisting mo.config.json"""

    @pytest.fixture
    def config_path(self, tmp_path):
        return tmp_path / "mo.config.json"

    def test_creates_default_when_missing(self, config_path):
        store = ConfigStore.load_or_create(config_path)

        assert config_path.exists()
        on_disk = json.loads(config_path.read_text())
        assert on_disk["includeList"] == ["src/**/*.js", "src/**/*.ts"]
        assert "node_modules" in on_disk["ignoreList"]
        assert on_disk["isInitialized"] is True
        assert store.config.git_enabled is False
        assert store.config.command_exec_enabled is False

    def test_loads_aliased_keys(self, config_path):
        config_path.write_text(
            json.dumps({"includeList": ["app/**/*.py"], "ignoreList": ["venv"], "git": True, "cmd": True, "port": 4000})
        )
        config = ConfigStore.load_or_create(config_path).config

        assert config.include_patterns == ["app/**/*.py"]
        assert config.ignore_patterns == ["venv"]
        assert config.git_enabled is True
        assert config.command_exec_enabled is True
        assert config.port == 4000

    @pytest.mark.parametrize(
        "content",
        ['{"includeList": []}', '{"port": 3000}', "not json", '{"includeList": ["/abs/**/*.js"]}', '{"includeList": [""]}'],
    )
    def test_invalid_config_raises(self, config_path, content):
        config_path.write_text(content)
        with pytest.raises(ConfigError):
            ConfigStore.load_or_create(config_path)

    def test_persist_keeps_unknown_keys(self, config_path):
        config_path.write_text(json.dumps({"includeList": ["src/*"], "organizationId": 7, "templates": {"a": 1}}))
        store = ConfigStore.load_or_create(config_path)

        store.register_app("app-42")

        on_disk = json.loads(config_path.read_text())
        assert on_disk["organizationId"] == 7
        assert on_disk["templates"] == {"a": 1}
        assert on_disk["appId"] == "app-42"
        assert on_disk["isInitialized"] is True

    def test_mark_initialized_persists(self, config_path):
        config_path.write_text(json.dumps({"includeList": ["src/*"], "isInitialized": False}))
        store = ConfigStore.load_or_create(config_path)

        store.mark_initialized()

        assert json.loads(config_path.read_text())["isInitialized"] is True
