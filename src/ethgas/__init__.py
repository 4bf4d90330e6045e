"""
ethgas - attribute on-chain gas usage to contract methods and deployments
"""

__version__ = "0.1.0"

from .core import (
    RunController,
    RunState,
    MethodRecord,
    DeploymentRecord,
    CodeHashIndex,
    GasReportData,
    GasUsage,
)
from .config import ReporterConfig, load_config
from .utils import (
    EthGasError,
    RPCConnectionError,
    ConfigError,
    ArtifactError,
    RunFinishedError,
)

__all__ = [
    '__version__',
    'RunController',
    'RunState',
    'MethodRecord',
    'DeploymentRecord',
    'CodeHashIndex',
    'GasReportData',
    'GasUsage',
    'ReporterConfig',
    'load_config',
    'EthGasError',
    'RPCConnectionError',
    'ConfigError',
    'ArtifactError',
    'RunFinishedError',
]
