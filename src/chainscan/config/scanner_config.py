# src/chainscan/config/scanner_config.py

import copy
import os
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ConfigurationError
from ..utils.config import Config

ENV_OVERRIDES = {
    "CHAINSCAN_RPC_URL": ("rpc.url", str),
    "CHAINSCAN_BLOCK_COUNT": ("scan.block_count", int),
}

# dotted key -> (accepted types, minimum, may be None)
VALUE_RULES = {
    "rpc.url": ((str,), None, False),
    "rpc.timeout": ((int, float), 0, False),
    "scan.block_count": ((int,), 0, False),
    "scan.prefetch_workers": ((int,), 1, False),
    "scan.max_attempts": ((int,), 1, False),
    "scan.backoff_base": ((int, float), 0, False),
    "scan.max_backoff": ((int, float), 0, False),
    "monitoring.log_level": ((str,), None, True),
    "monitoring.log_dir": ((str,), None, True),
    "monitoring.metrics_port": ((int,), 1, True),
}


class ScannerConfig:
    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.config_path = config_path
        self.config = self._load_config()
        self._apply_env(os.environ if environ is None else environ)
        self._check_values()

    @staticmethod
    def default_config() -> Dict[str, Any]:
        return {
            "rpc": {
                "url": Config.DEFAULT_RPC_URL,
                "timeout": Config.RPC_TIMEOUT
            },
            "scan": {
                "block_count": Config.DEFAULT_BLOCK_COUNT,
                "prefetch_workers": Config.PREFETCH_WORKERS,
                "max_attempts": Config.MAX_ATTEMPTS,
                "backoff_base": Config.RETRY_BACKOFF_BASE,
                "max_backoff": Config.MAX_RETRY_BACKOFF
            },
            "monitoring": {
                "log_level": Config.LOG_LEVEL,
                "log_dir": None,
                "metrics_port": None
            }
        }

    def _load_config(self) -> Dict[str, Any]:
        config = self.default_config()
        if not self.config_path or not os.path.exists(self.config_path):
            return config

        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read config {self.config_path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config {self.config_path} must be a mapping")
        return _merge(config, loaded)

    def _apply_env(self, environ) -> None:
        for var, (key, cast) in ENV_OVERRIDES.items():
            if var not in environ:
                continue
            try:
                self.update(key, cast(environ[var]), persist=False)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {var}: {environ[var]!r}") from e

    def _check_values(self) -> None:
        for key, (types, minimum, optional) in VALUE_RULES.items():
            value = self.get(key)
            if value is None and optional:
                continue
            # bool is an int subclass but never a valid count or duration
            if isinstance(value, bool) or not isinstance(value, types):
                raise ConfigurationError(
                    f"{key} must be {' or '.join(t.__name__ for t in types)}, got {value!r}"
                )
            if minimum is not None and value < minimum:
                raise ConfigurationError(f"{key} must be at least {minimum}, got {value!r}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        try:
            keys = key.split('.')
            value = self.config
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def update(self, key: str, value: Any, persist: bool = True):
        """Update configuration value."""
        keys = key.split('.')
        config = self.config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value

        if persist and self.config_path:
            self.save()

    def save(self):
        directory = os.path.dirname(self.config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.safe_dump(self.config, f)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
