"""
Chain data types consumed by the attribution core.

Each type can be built from a web3 ``AttributeDict`` (ints and ``HexBytes``)
or from a raw JSON-RPC response (hex quantity strings), so the core only ever
sees plain ints and ``0x``-prefixed lowercase hex strings.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from eth_utils import to_hex


def to_int(value: Any, default: int = 0) -> int:
    """Convert an RPC quantity (int or hex string) to int."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 16) if value.startswith(('0x', '0X')) else int(value)
    return int(value)


def to_hex_str(value: Any) -> str:
    """Convert bytes / HexBytes / hex string to a lowercase 0x-prefixed string."""
    if value is None:
        return '0x'
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    text = str(value).lower()
    if not text.startswith('0x'):
        text = '0x' + text
    return text


def _get(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class Block:
    """A mined block; only the fields gas attribution needs."""
    number: int
    gas_used: int
    transaction_hashes: List[str] = field(default_factory=list)
    gas_limit: Optional[int] = None

    @classmethod
    def from_rpc(cls, data: Mapping[str, Any]) -> "Block":
        hashes = []
        for tx in data.get('transactions', []) or []:
            # Full transaction objects carry their own hash
            if isinstance(tx, Mapping):
                tx = tx.get('hash')
            hashes.append(to_hex_str(tx))
        gas_limit = _get(data, 'gasLimit', 'gas_limit')
        return cls(
            number=to_int(data.get('number')),
            gas_used=to_int(_get(data, 'gasUsed', 'gas_used')),
            transaction_hashes=hashes,
            gas_limit=to_int(gas_limit) if gas_limit is not None else None,
        )


@dataclass(frozen=True)
class Transaction:
    """A transaction; ``to`` is None for contract creations."""
    hash: str
    to: Optional[str]
    input: str

    @classmethod
    def from_rpc(cls, data: Mapping[str, Any]) -> "Transaction":
        to = data.get('to')
        return cls(
            hash=to_hex_str(data.get('hash')),
            to=to_hex_str(to) if to else None,
            input=to_hex_str(_get(data, 'input', 'data')),
        )


@dataclass(frozen=True)
class Receipt:
    """
    A transaction receipt.

    ``status`` is None for pre-Byzantium receipts, which carry no status
    field and are treated as successful.
    """
    status: Optional[int]
    gas_used: int
    contract_address: Optional[str] = None

    @property
    def reverted(self) -> bool:
        return self.status == 0

    @classmethod
    def from_rpc(cls, data: Mapping[str, Any]) -> "Receipt":
        status = data.get('status')
        contract_address = _get(data, 'contractAddress', 'contract_address')
        return cls(
            status=to_int(status) if status is not None else None,
            gas_used=to_int(_get(data, 'gasUsed', 'gas_used')),
            contract_address=to_hex_str(contract_address) if contract_address else None,
        )
