"""
Build the pre-populated gas records for a run from compiled artifacts.

Supports the JSON artifacts written by Truffle (``build/contracts``),
Hardhat (``artifacts/``) and Foundry (``out/``). Artifacts are loaded in
sorted path order; that order is the tie-break order of the selector
fallback during method attribution.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set

from eth_utils import keccak

from ethgas.artifacts.matching import fingerprint, strip_hex_prefix
from ethgas.core.records import CodeHashIndex, DeploymentRecord, MethodRecord, RunState
from ethgas.utils.exceptions import ArtifactError, ArtifactsNotFoundError
from ethgas.utils.logging import get_logger

logger = get_logger('artifacts')

# contract/library/interface declarations in Solidity sources
_DECLARATION = re.compile(
    r'^\s*(?:abstract\s+)?(?:contract|library|interface)\s+([A-Za-z_$][\w$]*)',
    re.MULTILINE
)
_READ_ONLY_MUTABILITY = ('view', 'pure')


@dataclass
class ContractArtifact:
    """The parts of a compiled artifact gas attribution needs."""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    deployed_bytecode: str
    networks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    path: Optional[Path] = None

    @property
    def is_interface(self) -> bool:
        return not strip_hex_prefix(self.bytecode)


def format_abi_type(abi_input: Dict[str, Any]) -> str:
    """Canonical type of an ABI input, expanding tuples."""
    abi_type = abi_input['type']
    if abi_type.startswith('tuple'):
        components = ','.join(format_abi_type(c) for c in abi_input.get('components', []))
        return f"({components}){abi_type[len('tuple'):]}"
    return abi_type


def function_signature(abi_item: Dict[str, Any]) -> str:
    types = ','.join(format_abi_type(inp) for inp in abi_item.get('inputs', []))
    return f"{abi_item['name']}({types})"


def function_selector(abi_item: Dict[str, Any]) -> str:
    """4-byte selector of an ABI function item, as 8 hex chars."""
    return keccak(text=function_signature(abi_item))[:4].hex()


def is_state_changing(abi_item: Dict[str, Any]) -> bool:
    if abi_item.get('type') != 'function' or 'name' not in abi_item:
        return False
    if abi_item.get('constant'):
        return False
    return abi_item.get('stateMutability') not in _READ_ONLY_MUTABILITY


def _bytecode_field(value: Any) -> str:
    # Foundry nests the hex under "object"
    if isinstance(value, dict):
        value = value.get('object')
    if not value:
        return '0x'
    value = str(value)
    return value if value.startswith('0x') else '0x' + value


def parse_artifact(path: Path) -> Optional[ContractArtifact]:
    """
    Parse one artifact JSON file.

    Returns None for JSON files that are not contract artifacts (hardhat
    ``.dbg.json`` files, build-info, unrelated config).

    Raises:
        ArtifactError: If the file is not valid JSON
    """
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Invalid artifact JSON in {path}: {e}", artifact=str(path)) from e

    if not isinstance(data, dict) or not isinstance(data.get('abi'), list):
        return None
    if 'bytecode' not in data:
        return None

    return ContractArtifact(
        name=data.get('contractName') or path.stem,
        abi=data['abi'],
        bytecode=_bytecode_field(data.get('bytecode')),
        deployed_bytecode=_bytecode_field(data.get('deployedBytecode')),
        networks=data.get('networks') or {},
        path=path,
    )


def iter_artifacts(artifacts_dir: Path) -> Iterator[ContractArtifact]:
    """Yield every contract artifact under ``artifacts_dir`` in sorted path order."""
    artifacts_dir = Path(artifacts_dir)
    if not artifacts_dir.is_dir():
        raise ArtifactsNotFoundError(str(artifacts_dir))

    for path in sorted(artifacts_dir.rglob('*.json')):
        if path.name.endswith('.dbg.json') or 'build-info' in path.parts:
            continue
        artifact = parse_artifact(path)
        if artifact is not None:
            yield artifact


def declared_contract_names(src_path: Path) -> Set[str]:
    """Names of contracts, libraries and interfaces declared under a Solidity source path."""
    src_path = Path(src_path)
    files = [src_path] if src_path.is_file() else sorted(src_path.rglob('*.sol'))
    names: Set[str] = set()
    for sol_file in files:
        names.update(_DECLARATION.findall(sol_file.read_text(errors='replace')))
    return names


def build_records(artifacts_dir, src_path=None, client=None) -> RunState:
    """
    Build the MethodRecord and DeploymentRecord sets for a run.

    Args:
        artifacts_dir: Directory of compiled JSON artifacts
        src_path: Optional Solidity source file or folder; when given, only
            contracts declared there are tracked
        client: Optional RPC client; when given, contracts already deployed
            on the current network (artifact ``networks`` entries) are
            pre-registered in the code hash index

    Returns:
        A fresh RunState
    """
    allowed = None
    if src_path is not None:
        if Path(src_path).exists():
            allowed = declared_contract_names(src_path)
        else:
            logger.warning(f"Source path {src_path} not found, tracking every artifact")

    network_id = client.network_id() if client is not None else None
    state = RunState(code_hashes=CodeHashIndex())

    for artifact in iter_artifacts(artifacts_dir):
        if allowed is not None and artifact.name not in allowed:
            continue

        state.add_deployment(DeploymentRecord(contract_name=artifact.name, template=artifact.bytecode))

        # Interfaces have no code of their own, so their methods are never charged
        if not artifact.is_interface:
            for item in artifact.abi:
                if not is_state_changing(item):
                    continue
                record = MethodRecord(
                    contract_name=artifact.name,
                    selector=function_selector(item),
                    method_name=item['name'],
                )
                if not state.add_method(record):
                    logger.debug(f"Duplicate method record {record.composite_key} in {artifact.path}")

        if network_id is not None:
            deployed = artifact.networks.get(network_id, {}).get('address')
            if deployed:
                code = client.get_code(deployed)
                if strip_hex_prefix(code):
                    state.code_hashes.bind(fingerprint(code), artifact.name)

    logger.debug(
        f"Loaded {len(state.method_records)} method records and "
        f"{len(state.deployment_records)} deployment records from {artifacts_dir}"
    )
    return state
