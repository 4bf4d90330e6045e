"""
Core module for ethgas.

The gas attribution engine:
- BlockScanner / TransactionClassifier: walk block ranges and sort transactions
- ContractResolver: runtime code fingerprint -> contract name
- MethodAttributor / DeploymentAttributor: charge gas samples to records
- RunController: per-test scan windows and the run lifecycle
"""

from .records import (
    MethodRecord,
    DeploymentRecord,
    CodeHashIndex,
    RunState,
)
from .scanner import (
    BlockScanner,
    TransactionClassifier,
    ClassifiedTransaction,
    TxKind,
)
from .attribution import (
    ContractResolver,
    MethodAttributor,
    DeploymentAttributor,
)
from .run_controller import (
    RunController,
    GasUsage,
    GasReportData,
)

__all__ = [
    'MethodRecord',
    'DeploymentRecord',
    'CodeHashIndex',
    'RunState',
    'BlockScanner',
    'TransactionClassifier',
    'ClassifiedTransaction',
    'TxKind',
    'ContractResolver',
    'MethodAttributor',
    'DeploymentAttributor',
    'RunController',
    'GasUsage',
    'GasReportData',
]
