"""
Scan command implementation.

Attributes every deployment and call in a block range, outside of any test
run, and prints the resulting gas report.
"""

import sys

from ethgas.core.run_controller import RunController
from ethgas.report.gas_table import write_report
from ethgas.rpc.client import SyncRPCClient
from ethgas.utils.colors import gas_value, info, set_colors_enabled
from ethgas.utils.exceptions import EthGasError, format_error
from ethgas.utils.logging import logger

from .common import config_from_args, configure_logging


def scan_command(args) -> int:
    """
    Execute the scan command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    configure_logging(args)
    json_mode = getattr(args, 'json', False)

    try:
        config = config_from_args(args)
        if config.no_colors or config.output_file:
            set_colors_enabled(False)
        client = SyncRPCClient(config.rpc_url, timeout=config.rpc_timeout)
        controller = RunController(client, artifacts_dir=config.artifacts, src_path=config.src)

        to_block = args.to_block if args.to_block is not None else client.block_number()
        logger.debug(f"Scanning blocks {args.from_block}..{to_block} on {config.rpc_url}")
        gas_used = controller.attribute_range(args.from_block, to_block)
        data = controller.finish()
    except EthGasError as e:
        print(format_error(e, json_mode))
        return 1

    if not json_mode:
        print(f"Blocks {info(args.from_block)}..{info(to_block)} used {gas_value(gas_used)}")
    write_report(data, config, client=client, stream=sys.stdout)
    return 0
