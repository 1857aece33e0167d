"""Tests for configuration loading."""

import json

import pytest

from faceitlens.core.config import (
    FaceitLensConfig,
    config_to_dict,
    dict_to_config,
    generate_default_config,
    load_config,
    load_env_config,
    merge_configs,
    save_config,
)


class TestEnvConfig:
    """Tests for environment variable overrides."""

    def test_api_keys(self, monkeypatch):
        monkeypatch.setenv("FACEIT_API_KEY", "12345")
        monkeypatch.setenv("STEAM_API_KEY", "abc")
        env = load_env_config()
        assert env["faceit"]["api_key"] == "12345"
        assert env["steam"]["api_key"] == "abc"

    def test_numeric_conversion(self, monkeypatch):
        monkeypatch.setenv("FACEITLENS_MATCH_LIMIT", "50")
        monkeypatch.setenv("FACEITLENS_TIMEOUT", "2.5")
        env = load_env_config()
        assert env["faceit"]["default_match_limit"] == 50
        assert env["faceit"]["timeout_seconds"] == 2.5

    def test_unset(self):
        assert load_env_config() == {}


class TestLoadConfig:
    """Tests for file + env precedence."""

    def test_defaults(self):
        config = load_config(include_env=False)
        assert isinstance(config, FaceitLensConfig)
        assert config.faceit.default_match_limit == 30
        assert config.faceit.max_match_limit == 100
        assert config.history.max_entries == 20

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "faceitlens.yaml"
        path.write_text("faceit:\n  default_match_limit: 10\nlogging:\n  level: DEBUG\n")
        config = load_config(path, include_env=False)
        assert config.faceit.default_match_limit == 10
        assert config.logging.level == "DEBUG"

    def test_toml_file(self, tmp_path):
        path = tmp_path / "faceitlens.toml"
        path.write_text('[history]\nmax_entries = 5\n')
        assert load_config(path, include_env=False).history.max_entries == 5

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "faceitlens.json"
        path.write_text(json.dumps({"faceit": {"default_match_limit": 10}}))
        monkeypatch.setenv("FACEITLENS_MATCH_LIMIT", "40")
        assert load_config(path).faceit.default_match_limit == 40

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "elsewhere.yaml"
        path.write_text("history:\n  max_entries: 7\n")
        monkeypatch.setenv("FACEITLENS_CONFIG", str(path))
        assert load_config(include_env=False).history.max_entries == 7

    def test_unknown_keys_ignored(self):
        config = dict_to_config({"faceit": {"bogus": 1}, "other": {}})
        assert not hasattr(config.faceit, "bogus")

    def test_merge_is_recursive(self):
        merged = merge_configs({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}}


class TestSaveConfig:
    """Tests for writing configuration."""

    def test_secrets_not_written(self, tmp_path):
        config = FaceitLensConfig()
        config.faceit.api_key = "secret"
        path = tmp_path / "out.json"
        save_config(config, path)

        assert "secret" not in path.read_text()
        assert "api_key" in config_to_dict(config, include_secrets=True)["faceit"]

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            save_config(FaceitLensConfig(), tmp_path / "out.ini")

    def test_default_yaml_loads(self, tmp_path):
        path = tmp_path / "faceitlens.yaml"
        generate_default_config(path)
        config = load_config(path, include_env=False)
        assert config.faceit.game == "cs2"
        assert config.steam.base_url == "https://api.steampowered.com"
