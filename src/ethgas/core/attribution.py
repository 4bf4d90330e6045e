"""
Gas attribution: resolving transactions to contract methods and deployments.

Deployments must be attributed before calls in the same window, because a
matched deployment registers the runtime code fingerprint that call
resolution looks up.
"""

from typing import Optional

from ethgas.artifacts.matching import (
    composite_key,
    fingerprint,
    matches_template,
    method_selector,
)
from ethgas.core.records import DeploymentRecord, MethodRecord, RunState
from ethgas.core.scanner import BlockScanner, ClassifiedTransaction, TransactionClassifier
from ethgas.utils.logging import get_logger

logger = get_logger('attribution')


class ContractResolver:
    """Maps a deployed address to a contract name through the code hash index."""

    def __init__(self, client, state: RunState):
        self.client = client
        self.state = state

    def resolve(self, address: Optional[str]) -> Optional[str]:
        if not address:
            return None
        code = self.client.get_code(address)
        return self.state.code_hashes.lookup(fingerprint(code))

    def register(self, address: str, contract_name: str) -> str:
        """Bind the runtime code now stored at ``address`` to ``contract_name``."""
        code_hash = fingerprint(self.client.get_code(address))
        self.state.code_hashes.bind(code_hash, contract_name)
        return code_hash


class MethodAttributor:
    """
    Charges the gas of successful calls to method records.

    Resolution order:

    1. the contract name registered for the target's runtime code;
    2. if there is none, or that contract has no method with the call's
       selector (a proxy forwarding via delegatecall, or another artifact
       sharing the same minimal bytecode), the first method record in load
       order with the same selector, whatever its contract.

    The fallback cannot tell apart contracts that share a selector; the
    first-loaded one wins. Calls that still resolve to nothing are left
    unattributed and only show up in the block gas total.
    """

    def __init__(self, client, state: RunState, resolver: Optional[ContractResolver] = None):
        self.client = client
        self.state = state
        self.resolver = resolver or ContractResolver(client, state)
        self.scanner = BlockScanner(client)
        self.classifier = TransactionClassifier(client)

    def find_record(self, to: Optional[str], calldata: str) -> Optional[MethodRecord]:
        selector = method_selector(calldata)
        if selector is None:
            return None

        contract_name = self.resolver.resolve(to)
        proxied = False
        if contract_name is not None:
            proxied = composite_key(contract_name, selector) not in self.state.method_records

        if contract_name is None or proxied:
            fallback = self._first_with_selector(selector)
            if fallback is not None:
                logger.trace(
                    f"Call to {to} ({selector}) resolved by selector to {fallback.contract_name}"
                    + (f" instead of {contract_name}" if proxied else "")
                )
                contract_name = fallback.contract_name

        if contract_name is None:
            return None
        return self.state.method(contract_name, selector)

    def _first_with_selector(self, selector: str) -> Optional[MethodRecord]:
        for record in self.state.method_records.values():
            if record.selector == selector:
                return record
        return None

    def attribute(self, item: ClassifiedTransaction) -> Optional[MethodRecord]:
        record = self.find_record(item.transaction.to, item.transaction.input)
        if record is None:
            logger.trace(f"Call {item.transaction.hash} not attributed")
            return None
        record.record(item.receipt.gas_used)
        return record

    def scan(self, start: int, head: int) -> int:
        """
        Attribute every successful call in ``[start, head]``.

        Returns:
            Total gas used by the scanned blocks
        """
        def visit(block):
            for item in self.classifier.calls(block):
                self.attribute(item)

        return self.scanner.scan(start, head, visit)


class DeploymentAttributor:
    """
    Charges the gas of successful contract creations to deployment records.

    The creation input is matched against each record's creation bytecode
    template. Records without bytecode (interfaces, abstract contracts) match
    any input and are never chosen. On a match, the runtime code left at the
    new address is registered so later calls into it can be resolved.
    """

    def __init__(self, client, state: RunState, resolver: Optional[ContractResolver] = None):
        self.client = client
        self.state = state
        self.resolver = resolver or ContractResolver(client, state)
        self.scanner = BlockScanner(client)
        self.classifier = TransactionClassifier(client)

    def find_record(self, creation_input: str) -> Optional[DeploymentRecord]:
        for record in self.state.deployment_records:
            if record.is_empty:
                continue
            if matches_template(creation_input, record.template):
                return record
        return None

    def attribute(self, item: ClassifiedTransaction) -> Optional[DeploymentRecord]:
        record = self.find_record(item.transaction.input)
        if record is None:
            logger.trace(f"Creation {item.transaction.hash} matches no known bytecode")
            return None

        record.record(item.receipt.gas_used)
        code_hash = self.resolver.register(item.receipt.contract_address, record.contract_name)
        logger.debug(
            f"Deployed {record.contract_name} at {item.receipt.contract_address} "
            f"(code hash {code_hash[:10]}, {item.receipt.gas_used} gas)"
        )
        return record

    def scan(self, start: int, head: int) -> None:
        def visit(block):
            for item in self.classifier.creations(block):
                self.attribute(item)

        self.scanner.scan(start, head, visit)
