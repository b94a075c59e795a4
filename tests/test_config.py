# tests/test_config.py
import logging
import os
import pytest
import yaml
from chainscan.config.scanner_config import ScannerConfig
from chainscan.exceptions import ConfigurationError
from chainscan.utils.config import Config
from chainscan.utils.logger import setup_logging


class TestScannerConfig:
    @pytest.fixture
    def config_path(self, tmp_path):
        return str(tmp_path / "config" / "chainscan.yaml")

    def test_defaults_without_file(self):
        config = ScannerConfig(None, environ={})
        assert config.get("scan.block_count") == Config.DEFAULT_BLOCK_COUNT
        assert config.get("rpc.url") == Config.DEFAULT_RPC_URL
        assert config.get("missing.key", "fallback") == "fallback"

    def test_file_values_merge_with_defaults(self, config_path):
        os.makedirs(os.path.dirname(config_path))
        with open(config_path, "w") as f:
            yaml.safe_dump({"scan": {"block_count": 50}}, f)

        config = ScannerConfig(config_path, environ={})
        assert config.get("scan.block_count") == 50
        assert config.get("scan.max_attempts") == Config.MAX_ATTEMPTS

    def test_environment_overrides(self):
        config = ScannerConfig(None, environ={
            "CHAINSCAN_RPC_URL": "http://node:8545",
            "CHAINSCAN_BLOCK_COUNT": "25",
        })
        assert config.get("rpc.url") == "http://node:8545"
        assert config.get("scan.block_count") == 25

    def test_bad_environment_value(self):
        with pytest.raises(ConfigurationError):
            ScannerConfig(None, environ={"CHAINSCAN_BLOCK_COUNT": "many"})

    def test_update_persists(self, config_path):
        config = ScannerConfig(config_path, environ={})
        config.update("rpc.url", "http://other:8545")

        reloaded = ScannerConfig(config_path, environ={})
        assert reloaded.get("rpc.url") == "http://other:8545"

    @pytest.mark.parametrize("content", [
        "scan:\n  block_count: '5'\n",
        "scan:\n  block_count: -1\n",
        "scan:\n  prefetch_workers: 0\n",
        "scan:\n  max_attempts: true\n",
        "scan: 5\n",
        "rpc:\n  url: 8545\n",
        "monitoring:\n  metrics_port: http\n",
    ])
    def test_wrong_value_types_rejected(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            ScannerConfig(str(path), environ={})

    def test_non_mapping_file_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            ScannerConfig(str(path), environ={})


class TestLogging:
    def test_setup_logging_writes_file(self, tmp_path):
        logger = setup_logging("warning", str(tmp_path))
        logging.getLogger("chainscan.scanner").debug("visible in file")
        for handler in logger.handlers:
            handler.flush()

        files = os.listdir(tmp_path)
        assert len(files) == 1
        with open(tmp_path / files[0]) as f:
            assert "visible in file" in f.read()
        setup_logging("INFO")
