#!/usr/bin/env python3
"""
Main entry point for the ethgas CLI.

Parses arguments and routes to the command implementations in this package.
"""

import sys
import argparse

from ethgas import __version__
from ethgas.rpc.client import DEFAULT_RPC_URL

from .scan import scan_command
from .methods import list_methods_command


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--config', default=None, help='Reporter config file (default: ./.ethgas.json if present)')
    parser.add_argument('--artifacts', '-a', default=None, help='Folder of compiled contract artifacts')
    parser.add_argument('--src', '-s', default=None, help='Solidity source folder restricting tracked contracts')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--verbose', action='store_true', help='Log every attribution decision')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress log output on stderr')
    parser.add_argument('--log-file', default=None, help='Also write the log to this file, at trace level')


def main(argv=None):
    """Main entry point for the ethgas CLI."""
    parser = argparse.ArgumentParser(description='ethgas - attribute gas usage to contract methods and deployments')
    parser.add_argument('--version', '-v', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')
    subparsers.required = True

    # scan command
    scan_parser = subparsers.add_parser('scan', help='Attribute gas over a block range and print the gas report')
    scan_parser.add_argument('--from-block', type=int, default=0, help='First block to scan (default: 0)')
    scan_parser.add_argument('--to-block', type=int, default=None, help='Last block to scan (default: chain head)')
    scan_parser.add_argument('--rpc-url', '-r', default=None, help=f'RPC URL (default: {DEFAULT_RPC_URL})')
    scan_parser.add_argument('--output-file', '-o', default=None, help='Write the report to a file')
    scan_parser.add_argument('--no-colors', action='store_true', default=None, help='Disable colored output')
    scan_parser.add_argument('--gas-price', type=float, default=None, help='Gas price in gwei (default: from node)')
    scan_parser.add_argument('--currency', default=None, help='Currency for the cost column')
    _add_common_options(scan_parser)

    # list-methods command
    methods_parser = subparsers.add_parser('list-methods', help='List the methods and deployments that can be attributed')
    _add_common_options(methods_parser)

    args = parser.parse_args(argv)

    if args.command == 'scan':
        return scan_command(args)
    elif args.command == 'list-methods':
        return list_methods_command(args)

    return 0


if __name__ == '__main__':
    sys.exit(main())
