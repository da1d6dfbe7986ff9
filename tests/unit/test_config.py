"""
Runtime Configuration Unit Tests
Tests for core/config/runtime.py
"""
import json

import pytest

from core.config.runtime import (
    RuntimeConfig,
    default_config_paths,
    get_default_config_template,
    load_runtime_config,
)


class TestRuntimeConfig:
    """Tests for RuntimeConfig construction."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.server.port == 8080
        assert config.server.proofs_dirname == ".merklefs-proofs"
        assert config.server.storage_dir == "merklefs-store"
        assert config.client.server_url == "http://127.0.0.1:8080"
        assert config.log_level == "INFO"

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"server": {"port": 9000}, "log_level": "DEBUG"})

        assert config.server.port == 9000
        assert config.server.host == "0.0.0.0"
        assert config.client.timeout == 30.0
        assert config.log_level == "DEBUG"

    def test_from_dict_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"server": {"no_such_option": 1}})

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"client": {"server_url": "http://files:1234"}})

        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_template_is_valid_json(self):
        data = json.loads(get_default_config_template())

        assert RuntimeConfig.from_dict(data) == RuntimeConfig()


class TestEnvOverrides:
    """Tests for MERKLEFS_* environment variables."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MERKLEFS_PORT", "9999")
        monkeypatch.setenv("MERKLEFS_SERVER_URL", "http://example:1")
        monkeypatch.setenv("MERKLEFS_HASH_WORKERS", "4")

        config = RuntimeConfig.from_env()

        assert config.server.port == 9999
        assert config.client.server_url == "http://example:1"
        assert config.server.hash_workers == 4
        assert config.client.hash_workers == 4

    def test_with_env_overrides_does_not_mutate(self, monkeypatch):
        base = RuntimeConfig()
        monkeypatch.setenv("MERKLEFS_STORAGE_DIR", "/srv/files")

        overridden = base.with_env_overrides()

        assert overridden.server.storage_dir == "/srv/files"
        assert base.server.storage_dir == "merklefs-store"

    def test_no_overrides_returns_same(self):
        config = RuntimeConfig()

        assert config.with_env_overrides() is config


class TestLoadRuntimeConfig:
    """Tests for load_runtime_config()."""

    def test_defaults_without_files(self):
        assert load_runtime_config() == RuntimeConfig()

    def test_reads_file_in_cwd(self, tmp_path):
        (tmp_path / "merklefs.json").write_text(json.dumps({"server": {"port": 7000}}))

        assert default_config_paths()[0].resolve() == (tmp_path / "merklefs.json").resolve()
        assert load_runtime_config().server.port == 7000

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"server": {"port": 7000}}))
        monkeypatch.setenv("MERKLEFS_PORT", "7001")

        assert load_runtime_config(path).server.port == 7001

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_runtime_config(tmp_path / "missing.json")

    def test_broken_default_file_ignored(self, tmp_path):
        (tmp_path / "merklefs.json").write_text("{not json")

        assert load_runtime_config() == RuntimeConfig()
