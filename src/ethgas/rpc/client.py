"""
Synchronous RPC client used by the attribution core.

Wraps a web3 HTTP provider. Every call blocks until the node answers; the
only timeout is the HTTP request timeout configured on the provider.
Not-found lookups return None; anything else propagates and aborts the run.
"""

from typing import Optional

from web3 import Web3
from web3.exceptions import BlockNotFound, TransactionNotFound

from ethgas.rpc.types import Block, Receipt, Transaction, to_hex_str
from ethgas.utils.exceptions import RPCConnectionError
from ethgas.utils.logging import get_logger

logger = get_logger('rpc')

DEFAULT_RPC_URL = "http://localhost:8545"


class SyncRPCClient:
    """
    Blocking block/transaction/receipt/code lookups against one node.
    """

    def __init__(self, rpc_url: str = DEFAULT_RPC_URL, timeout: int = 30, w3: Optional[Web3] = None):
        self.rpc_url = rpc_url
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

        try:
            # A direct call is more reliable than is_connected()
            self.w3.eth.block_number
        except Exception as e:
            raise RPCConnectionError(
                f"Failed to connect to {rpc_url}: {e}",
                rpc_url=rpc_url
            ) from e
        logger.debug(f"Connected to RPC: {rpc_url}")

    def block_number(self) -> int:
        return int(self.w3.eth.block_number)

    def get_block(self, number: int) -> Optional[Block]:
        try:
            block = self.w3.eth.get_block(number)
        except BlockNotFound:
            return None
        if block is None:
            return None
        return Block.from_rpc(block)

    def get_transaction(self, tx_hash: str) -> Optional[Transaction]:
        try:
            tx = self.w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return None
        if tx is None:
            return None
        return Transaction.from_rpc(tx)

    def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        try:
            receipt = self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        # Some nodes return None instead of raising
        if receipt is None:
            return None
        return Receipt.from_rpc(receipt)

    def get_code(self, address: str) -> str:
        code = self.w3.eth.get_code(Web3.to_checksum_address(address))
        return to_hex_str(code)

    def gas_price(self) -> int:
        return int(self.w3.eth.gas_price)

    def network_id(self) -> str:
        return str(self.w3.net.version)
