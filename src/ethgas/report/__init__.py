"""
Gas report rendering and price lookup.
"""

from .gas_table import render_report, report_to_dict, sample_stats, write_report
from .prices import fetch_eth_price, gas_cost, resolve_eth_price, resolve_gas_price

__all__ = [
    'render_report',
    'report_to_dict',
    'sample_stats',
    'write_report',
    'fetch_eth_price',
    'gas_cost',
    'resolve_eth_price',
    'resolve_gas_price',
]
