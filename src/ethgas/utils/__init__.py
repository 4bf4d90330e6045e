"""
Utilities module for ethgas.

Provides exception types, logging setup and console colors.
"""

from .exceptions import (
    EthGasError,
    RPCConnectionError,
    ConfigError,
    ArtifactError,
    ArtifactsNotFoundError,
    RunFinishedError,
    format_error,
    format_exception_message,
)
from .logging import TRACE, setup_logging, get_logger, logger
from .colors import (
    Colors,
    SUPPORTS_COLOR,
    set_colors_enabled,
    bold, dim,
    error, info,
    gas_value, contract_name, method_name,
)

__all__ = [
    # Exceptions
    'EthGasError',
    'RPCConnectionError',
    'ConfigError',
    'ArtifactError',
    'ArtifactsNotFoundError',
    'RunFinishedError',
    'format_error',
    'format_exception_message',
    # Logging
    'TRACE',
    'setup_logging',
    'get_logger',
    'logger',
    # Colors
    'Colors',
    'SUPPORTS_COLOR',
    'set_colors_enabled',
    'bold', 'dim',
    'error', 'info',
    'gas_value', 'contract_name', 'method_name',
]
