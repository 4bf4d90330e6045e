"""
Common utilities for CLI commands.
"""

import logging
from typing import Any

from ethgas.config import ReporterConfig, load_config
from ethgas.utils.logging import setup_logging


def configure_logging(args: Any) -> logging.Logger:
    return setup_logging(
        debug=getattr(args, 'debug', False),
        verbose=getattr(args, 'verbose', False),
        quiet=getattr(args, 'quiet', False),
        log_file=getattr(args, 'log_file', None),
        use_colors=not getattr(args, 'no_colors', False),
    )


def config_from_args(args: Any) -> ReporterConfig:
    """
    Load the reporter config, letting command-line options override the file.

    Raises:
        ConfigError: If the config file is missing or malformed
    """
    return load_config(
        getattr(args, 'config', None),
        overrides={
            "artifacts": getattr(args, 'artifacts', None),
            "src": getattr(args, 'src', None),
            "rpc_url": getattr(args, 'rpc_url', None),
            "output_file": getattr(args, 'output_file', None),
            "no_colors": getattr(args, 'no_colors', None),
            "gas_price": getattr(args, 'gas_price', None),
            "currency": getattr(args, 'currency', None),
            "json_output": True if getattr(args, 'json', False) else None,
        },
    )
