"""
RPC access for ethgas: chain data types and the synchronous web3 client.
"""

from .types import Block, Transaction, Receipt
from .client import SyncRPCClient, DEFAULT_RPC_URL

__all__ = [
    'Block',
    'Transaction',
    'Receipt',
    'SyncRPCClient',
    'DEFAULT_RPC_URL',
]
