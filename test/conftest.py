"""Shared pytest fixtures for ethgas tests."""

import json
from itertools import count
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from ethgas.core.records import CodeHashIndex, DeploymentRecord, MethodRecord, RunState
from ethgas.rpc.types import Block, Receipt, Transaction

TRANSFER = "a9059cbb"   # transfer(address,uint256)
APPROVE = "095ea7b3"    # approve(address,uint256)
MINT = "40c10f19"       # mint(address,uint256)

TOKEN_BYTECODE = "0x608060405234801561001057600080fd5b506101a0806100206000396000f3fe"
TOKEN_RUNTIME = "0x608060405234801561001057600080fd5b5060043610610041576000"
VAULT_BYTECODE = "0x6080604052348015600f57600080fd5b5061022280601d6000396000f3fe"
VAULT_RUNTIME = "0x6080604052348015600f57600080fd5b50600436106100365760"
PROXY_BYTECODE = "0x3d602d80600a3d3981f3"
PROXY_RUNTIME = "0x363d3d373d3d3d363d73bebebebebebebebebebebebebebebebebebebebe5af43d82803e903d91602b57fd5bf3"

RECIPIENT = "000000000000000000000000" + "11" * 20
AMOUNT = "%064x" % 1000


def calldata(selector: str) -> str:
    return "0x" + selector + RECIPIENT + AMOUNT


class FakeChain:
    """
    In-memory node implementing the synchronous RPC client interface.

    Blocks are mined explicitly; each call/deploy helper returns the
    (transaction, receipt) pair to pass to ``mine``.
    """

    def __init__(self, start_block: int = 0):
        self.blocks: Dict[int, Block] = {}
        self.transactions: Dict[str, Transaction] = {}
        self.receipts: Dict[str, Receipt] = {}
        self.code: Dict[str, str] = {}
        self.head = start_block
        self.gas_limit = 30_000_000
        self.wei_gas_price = 20 * 10 ** 9
        self.network = "1337"
        self._hashes = count(1)
        self._addresses = count(0xC0DE)
        self.code_lookups: List[str] = []

    # -- client interface -------------------------------------------------

    def block_number(self) -> int:
        return self.head

    def get_block(self, number: int) -> Optional[Block]:
        return self.blocks.get(number)

    def get_transaction(self, tx_hash: str) -> Optional[Transaction]:
        return self.transactions.get(tx_hash)

    def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        return self.receipts.get(tx_hash)

    def get_code(self, address: str) -> str:
        self.code_lookups.append(address)
        return self.code.get(address.lower(), "0x")

    def gas_price(self) -> int:
        return self.wei_gas_price

    def network_id(self) -> str:
        return self.network

    # -- helpers ----------------------------------------------------------

    def _new_hash(self) -> str:
        return "0x%064x" % next(self._hashes)

    def new_address(self) -> str:
        return "0x%040x" % next(self._addresses)

    def deploy(self, bytecode: str, runtime: str, gas_used: int, status: int = 1,
               address: Optional[str] = None, constructor_args: str = ""):
        address = (address or self.new_address()).lower()
        tx = Transaction(hash=self._new_hash(), to=None, input=bytecode + constructor_args)
        receipt = Receipt(status=status, gas_used=gas_used, contract_address=address)
        if status:
            self.code[address] = runtime
        return tx, receipt

    def call(self, to: str, data: str, gas_used: int, status: int = 1):
        tx = Transaction(hash=self._new_hash(), to=to.lower(), input=data)
        receipt = Receipt(status=status, gas_used=gas_used)
        return tx, receipt

    def mine(self, *entries, gas_used: Optional[int] = None) -> Block:
        """Mine one block holding ``entries``; block gas defaults to the receipts' sum."""
        self.head += 1
        hashes = []
        for tx, receipt in entries:
            self.transactions[tx.hash] = tx
            self.receipts[tx.hash] = receipt
            hashes.append(tx.hash)
        total = gas_used if gas_used is not None else sum(r.gas_used for _, r in entries)
        block = Block(number=self.head, gas_used=total, transaction_hashes=hashes, gas_limit=self.gas_limit)
        self.blocks[self.head] = block
        return block

    def mine_each(self, *entries) -> None:
        """Automine: one block per transaction."""
        for entry in entries:
            self.mine(entry)

    def drop_block(self, number: int) -> None:
        self.blocks.pop(number, None)


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def run_state() -> RunState:
    """Records for Token, Vault, a minimal proxy and an interface, in load order."""
    state = RunState(code_hashes=CodeHashIndex())
    state.add_deployment(DeploymentRecord("IToken", "0x"))
    state.add_deployment(DeploymentRecord("Token", TOKEN_BYTECODE))
    state.add_deployment(DeploymentRecord("Vault", VAULT_BYTECODE))
    state.add_deployment(DeploymentRecord("Proxy", PROXY_BYTECODE))
    state.add_method(MethodRecord("Token", TRANSFER, "transfer"))
    state.add_method(MethodRecord("Token", APPROVE, "approve"))
    state.add_method(MethodRecord("Token", MINT, "mint"))
    state.add_method(MethodRecord("Vault", TRANSFER, "transfer"))
    return state


@pytest.fixture
def token_abi() -> List[dict]:
    return [
        {
            "type": "function", "name": "transfer", "stateMutability": "nonpayable",
            "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
            "outputs": [{"name": "", "type": "bool"}],
        },
        {
            "type": "function", "name": "approve", "stateMutability": "nonpayable",
            "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}],
            "outputs": [{"name": "", "type": "bool"}],
        },
        {
            "type": "function", "name": "balanceOf", "stateMutability": "view",
            "inputs": [{"name": "owner", "type": "address"}],
            "outputs": [{"name": "", "type": "uint256"}],
        },
        {
            "type": "event", "name": "Transfer", "anonymous": False,
            "inputs": [
                {"name": "from", "type": "address", "indexed": True},
                {"name": "to", "type": "address", "indexed": True},
                {"name": "value", "type": "uint256", "indexed": False},
            ],
        },
    ]


@pytest.fixture
def artifacts_dir(tmp_path: Path, token_abi: List[dict]) -> Path:
    """A truffle-style build/contracts folder with Token, Vault and IToken."""
    build = tmp_path / "build" / "contracts"
    build.mkdir(parents=True)

    artifacts = {
        "Token": {
            "contractName": "Token",
            "abi": token_abi,
            "bytecode": TOKEN_BYTECODE,
            "deployedBytecode": TOKEN_RUNTIME,
            "networks": {"1337": {"address": "0x00000000000000000000000000000000000000aa"}},
        },
        "Vault": {
            "contractName": "Vault",
            "abi": [token_abi[0]],
            "bytecode": VAULT_BYTECODE,
            "deployedBytecode": VAULT_RUNTIME,
            "networks": {},
        },
        "IToken": {
            "contractName": "IToken",
            "abi": token_abi,
            "bytecode": "0x",
            "deployedBytecode": "0x",
            "networks": {},
        },
    }
    for name, artifact in artifacts.items():
        (build / f"{name}.json").write_text(json.dumps(artifact))
    return build
