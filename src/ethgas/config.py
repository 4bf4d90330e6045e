"""
Reporter configuration.

Options come from a ``.ethgas.json`` file in the working directory, then
from explicit overrides (command line or pytest options). Keys may be
written in camelCase, as in the JavaScript reporter's ``.ethgas.js``, or in
snake_case.
"""

import json
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ethgas.rpc.client import DEFAULT_RPC_URL
from ethgas.utils.exceptions import ConfigError
from ethgas.utils.logging import get_logger

logger = get_logger('config')

CONFIG_FILE_NAME = ".ethgas.json"


@dataclass(frozen=True)
class ReporterConfig:
    """
    Attributes:
        src: Solidity source folder; only contracts declared there are tracked
        artifacts: Folder of compiled JSON artifacts
        rpc_url: Node the gas run scans
        rpc_timeout: HTTP timeout for RPC requests, in seconds
        show_time_spent: Report test duration next to its gas
        currency: Fiat currency for the cost column
        gas_price: Gas price in gwei; fetched from the node when unset
        eth_price: ETH price in ``currency``; fetched from ``price_api_url`` when unset
        price_api_url: Market rate endpoint, or empty to disable fetching
        output_file: Write the report here instead of stdout
        no_colors: Disable ANSI colors in the report
        json_output: Emit the report as JSON
        block_limit: Block gas limit for the "% of limit" column; read from the chain when unset
    """
    src: str = "contracts"
    artifacts: str = "build/contracts"
    rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout: int = 30
    show_time_spent: bool = False
    currency: str = "eur"
    gas_price: Optional[float] = None
    eth_price: Optional[float] = None
    price_api_url: str = "https://api.coingecko.com/api/v3/simple/price"
    output_file: Optional[str] = None
    no_colors: bool = False
    json_output: bool = False
    block_limit: Optional[int] = None

    @classmethod
    def field_names(cls):
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "ReporterConfig":
        return cls().merge(data, source=source)

    def merge(self, overrides: Dict[str, Any], source: Optional[str] = None) -> "ReporterConfig":
        """Return a copy with ``overrides`` applied; None values are ignored."""
        known = self.field_names()
        values = {}
        for key, value in overrides.items():
            name = _snake_case(key)
            if name not in known:
                raise ConfigError(f"Unknown configuration option: {key}", path=source)
            if value is not None:
                values[name] = value
        return replace(self, **values)


_WORD_START = re.compile(r'(.)([A-Z][a-z]+)')
_ACRONYM_START = re.compile(r'([a-z0-9])([A-Z])')


def _snake_case(key: str) -> str:
    """``showTimeSpent`` -> ``show_time_spent``; a run of capitals is one word (``rpcURL`` -> ``rpc_url``)."""
    return _ACRONYM_START.sub(r'\1_\2', _WORD_START.sub(r'\1_\2', key)).lower()


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> ReporterConfig:
    """
    Load the reporter configuration.

    Args:
        path: Explicit config file; defaults to ``.ethgas.json`` in the
            working directory, which may be absent
        overrides: Options that take precedence over the file

    Raises:
        ConfigError: If an explicit file is missing, or any file is malformed
    """
    config = ReporterConfig()

    config_path = Path(path) if path else Path.cwd() / CONFIG_FILE_NAME
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}", path=str(config_path)) from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a JSON object", path=str(config_path))
        config = config.merge(data, source=str(config_path))
        logger.debug(f"Loaded configuration from {config_path}")
    elif path:
        raise ConfigError(f"Configuration file not found: {path}", path=path)

    if overrides:
        config = config.merge(overrides)
    return config
