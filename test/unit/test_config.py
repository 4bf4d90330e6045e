"""Unit tests for reporter configuration loading."""

import json

import pytest

from ethgas.config import CONFIG_FILE_NAME, ReporterConfig, load_config
from ethgas.rpc.client import DEFAULT_RPC_URL
from ethgas.utils.exceptions import ConfigError


class TestReporterConfig:

    def test_defaults(self):
        config = ReporterConfig()
        assert config.src == "contracts"
        assert config.artifacts == "build/contracts"
        assert config.rpc_url == DEFAULT_RPC_URL
        assert config.currency == "eur"
        assert config.gas_price is None
        assert not config.show_time_spent

    def test_camel_case_keys(self):
        config = ReporterConfig.from_dict({"showTimeSpent": True, "gasPrice": 21, "noColors": True})
        assert config.show_time_spent is True
        assert config.gas_price == 21
        assert config.no_colors is True

    def test_acronym_keys(self):
        config = ReporterConfig.from_dict({"rpcURL": "http://node:8545", "RPCTimeout": 60})
        assert config.rpc_url == "http://node:8545"
        assert config.rpc_timeout == 60

    def test_unknown_key(self):
        with pytest.raises(ConfigError) as exc_info:
            ReporterConfig.from_dict({"onlyCalledMethods": True})
        assert "onlyCalledMethods" in exc_info.value.message

    def test_merge_ignores_none(self):
        config = ReporterConfig(currency="usd").merge({"currency": None, "src": "src"})
        assert config.currency == "usd"
        assert config.src == "src"


class TestLoadConfig:

    def test_no_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == ReporterConfig()

    def test_reads_file_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / CONFIG_FILE_NAME).write_text(json.dumps({"currency": "USD", "rpcUrl": "http://node:8545"}))
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.currency == "USD"
        assert config.rpc_url == "http://node:8545"

    def test_overrides_beat_file(self, tmp_path):
        path = tmp_path / "gas.json"
        path.write_text(json.dumps({"artifacts": "out", "src": "src"}))

        config = load_config(str(path), overrides={"artifacts": "artifacts", "src": None})

        assert config.artifacts == "artifacts"
        assert config.src == "src"

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(tmp_path / "missing.json"))
        assert exc_info.value.details["path"] == str(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "gas.json"
        path.write_text("{")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "gas.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(str(path))
