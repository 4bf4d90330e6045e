"""
Run-scoped gas records.

MethodRecord and DeploymentRecord sets are pre-populated from compiled
artifacts before any test runs; the CodeHashIndex maps runtime-code
fingerprints to contract names and only grows during a run. All three are
owned by one RunState, which is built fresh for every run.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ethgas.artifacts.matching import composite_key
from ethgas.utils.logging import get_logger

logger = get_logger('records')


@dataclass
class MethodRecord:
    """Gas samples for one (contract, method) pair."""
    contract_name: str
    selector: str
    method_name: str
    gas_samples: List[int] = field(default_factory=list)
    call_count: int = 0

    @property
    def composite_key(self) -> str:
        return composite_key(self.contract_name, self.selector)

    def record(self, gas_used: int) -> None:
        self.gas_samples.append(gas_used)
        self.call_count += 1


@dataclass
class DeploymentRecord:
    """Gas samples for deployments of one compiled contract."""
    contract_name: str
    template: str
    gas_samples: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True for interfaces and abstract contracts, which have no bytecode."""
        template = (self.template or '').lower()
        if template.startswith('0x'):
            template = template[2:]
        return not template

    def record(self, gas_used: int) -> None:
        self.gas_samples.append(gas_used)


class CodeHashIndex:
    """
    Runtime-code fingerprint -> contract name.

    Bindings are never removed or rebound: the first name bound to a
    fingerprint keeps it for the rest of the run. Unrelated contracts with
    identical runtime code therefore resolve to whichever was deployed first.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._names: Dict[str, str] = {}
        for fingerprint, name in (initial or {}).items():
            self.bind(fingerprint, name)

    def lookup(self, fingerprint: str) -> Optional[str]:
        return self._names.get(fingerprint)

    def bind(self, fingerprint: str, name: str) -> bool:
        """Bind a fingerprint to a name. Returns False if it was already bound elsewhere."""
        existing = self._names.get(fingerprint)
        if existing is None:
            self._names[fingerprint] = name
            return True
        if existing != name:
            logger.debug(f"Code hash {fingerprint[:10]} already bound to {existing}, ignoring {name}")
            return False
        return True

    def as_dict(self) -> Dict[str, str]:
        return dict(self._names)

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)


@dataclass
class RunState:
    """
    Everything one gas run mutates.

    ``method_records`` preserves insertion order (artifact load order); the
    selector fallback relies on it for its first-match tie-break.
    """
    method_records: Dict[str, MethodRecord] = field(default_factory=dict)
    deployment_records: List[DeploymentRecord] = field(default_factory=list)
    code_hashes: CodeHashIndex = field(default_factory=CodeHashIndex)

    def add_method(self, record: MethodRecord) -> bool:
        key = record.composite_key
        if key in self.method_records:
            return False
        self.method_records[key] = record
        return True

    def add_deployment(self, record: DeploymentRecord) -> None:
        self.deployment_records.append(record)

    def method(self, contract_name: str, selector: str) -> Optional[MethodRecord]:
        return self.method_records.get(composite_key(contract_name, selector))

    def deployment(self, contract_name: str) -> Optional[DeploymentRecord]:
        for record in self.deployment_records:
            if record.contract_name == contract_name:
                return record
        return None
