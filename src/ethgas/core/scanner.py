"""
Block range scanning and transaction classification.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

from ethgas.rpc.types import Block, Receipt, Transaction
from ethgas.utils.logging import get_logger

logger = get_logger('scanner')


class TxKind(str, Enum):
    CALL = "call"
    CREATION = "creation"


@dataclass(frozen=True)
class ClassifiedTransaction:
    kind: TxKind
    transaction: Transaction
    receipt: Receipt


class BlockScanner:
    """
    Walks an inclusive block range in ascending order.

    The upper bound is fixed by the caller before the walk starts. Blocks the
    node cannot return are skipped, not waited for: once the bound is fixed,
    a missing block is treated as authoritative.
    """

    def __init__(self, client):
        self.client = client

    def iter_blocks(self, start: int, head: int) -> Iterator[Block]:
        number = start
        while number <= head:
            block = self.client.get_block(number)
            if block is None:
                logger.trace(f"Block {number} not available, skipping")
            else:
                yield block
            number += 1

    def scan(self, start: int, head: int, visit: Optional[Callable[[Block], None]] = None) -> int:
        """
        Visit every available block in ``[start, head]``.

        Returns:
            Sum of ``gas_used`` over the visited blocks, including gas spent
            by reverted and unattributed transactions
        """
        gas_used = 0
        for block in self.iter_blocks(start, head):
            gas_used += block.gas_used
            if visit is not None:
                visit(block)
        return gas_used


class TransactionClassifier:
    """
    Splits a block's transactions into calls and creations.

    Reverted transactions and hashes whose transaction or receipt cannot be
    fetched are dropped without error.
    """

    def __init__(self, client):
        self.client = client

    def classify(self, block: Block, only: Optional[TxKind] = None) -> Iterator[ClassifiedTransaction]:
        for tx_hash in block.transaction_hashes:
            receipt = self.client.get_receipt(tx_hash)
            if receipt is None:
                logger.trace(f"No receipt for {tx_hash}, skipping")
                continue
            if receipt.reverted:
                logger.trace(f"{tx_hash} reverted, not attributed")
                continue

            kind = TxKind.CREATION if receipt.contract_address else TxKind.CALL
            if only is not None and kind != only:
                continue

            transaction = self.client.get_transaction(tx_hash)
            if transaction is None:
                logger.trace(f"Transaction {tx_hash} not available, skipping")
                continue

            yield ClassifiedTransaction(kind, transaction, receipt)

    def calls(self, block: Block) -> Iterator[ClassifiedTransaction]:
        return self.classify(block, only=TxKind.CALL)

    def creations(self, block: Block) -> Iterator[ClassifiedTransaction]:
        return self.classify(block, only=TxKind.CREATION)
