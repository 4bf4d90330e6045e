"""
List methods command implementation.

Shows which method and deployment records a gas run would start from.
"""

import json

from ethgas.artifacts import build_records
from ethgas.utils.colors import bold, contract_name, dim, method_name
from ethgas.utils.exceptions import EthGasError, format_error

from .common import config_from_args, configure_logging


def list_methods_command(args) -> int:
    """
    Execute the list-methods command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    configure_logging(args)
    json_mode = getattr(args, 'json', False)

    try:
        config = config_from_args(args)
        state = build_records(config.artifacts, src_path=config.src)
    except EthGasError as e:
        print(format_error(e, json_mode))
        return 1

    if json_mode:
        print(json.dumps({
            "methods": [
                {"contract": r.contract_name, "method": r.method_name, "selector": "0x" + r.selector}
                for r in state.method_records.values()
            ],
            "deployments": [
                {"contract": r.contract_name, "interface": r.is_empty}
                for r in state.deployment_records
            ],
        }, indent=2))
        return 0

    print(bold("Methods:"))
    for record in state.method_records.values():
        print(f"  {contract_name(record.contract_name)}.{method_name(record.method_name)} {dim('0x' + record.selector)}")
    print(bold("Deployments:"))
    for record in state.deployment_records:
        suffix = dim(" (no bytecode)") if record.is_empty else ""
        print(f"  {contract_name(record.contract_name)}{suffix}")
    return 0
