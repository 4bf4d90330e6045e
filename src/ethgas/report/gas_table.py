"""
Render the gas report for a finished run.
"""

import io
import json
import sys
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from ethgas.report.prices import gas_cost, resolve_eth_price, resolve_gas_price
from ethgas.utils.logging import get_logger

logger = get_logger('report')

REPORT_WIDTH = 120


def sample_stats(samples: Sequence[int]) -> Optional[Dict[str, int]]:
    if not samples:
        return None
    return {
        "min": min(samples),
        "max": max(samples),
        "avg": round(sum(samples) / len(samples)),
    }


def _format_cost(cost: Optional[float]) -> str:
    return "-" if cost is None else f"{cost:.2f}"


def report_to_dict(data, config, gas_price: Optional[float] = None,
                   eth_price: Optional[float] = None) -> Dict[str, Any]:
    """
    Build the JSON form of the report.

    Only methods that were called and contracts that were deployed appear.
    """
    methods: List[Dict[str, Any]] = []
    for record in sorted(data.methods, key=lambda r: (r.contract_name, r.method_name)):
        stats = sample_stats(record.gas_samples)
        if stats is None:
            continue
        methods.append({
            "contract": record.contract_name,
            "method": record.method_name,
            "selector": "0x" + record.selector,
            "calls": record.call_count,
            "gasSamples": list(record.gas_samples),
            **stats,
            "cost": gas_cost(stats["avg"], gas_price, eth_price),
        })

    block_limit = config.block_limit or data.block_limit
    deployments: List[Dict[str, Any]] = []
    for record in data.deployments:
        stats = sample_stats(record.gas_samples)
        if stats is None:
            continue
        percent = round(100 * stats["avg"] / block_limit, 1) if block_limit else None
        deployments.append({
            "contract": record.contract_name,
            "gasSamples": list(record.gas_samples),
            **stats,
            "percentOfLimit": percent,
            "cost": gas_cost(stats["avg"], gas_price, eth_price),
        })

    return {
        "config": {
            "currency": config.currency,
            "gasPrice": gas_price,
            "ethPrice": eth_price,
            "blockLimit": block_limit,
        },
        "methods": methods,
        "deployments": deployments,
        "codeHashes": dict(data.code_hashes),
    }


def build_tables(report: Dict[str, Any]) -> List[Table]:
    settings = report["config"]
    currency = settings["currency"].lower()

    caption_parts = []
    if settings["blockLimit"]:
        caption_parts.append(f"Block limit: {settings['blockLimit']} gas")
    if settings["gasPrice"] is not None:
        caption_parts.append(f"{settings['gasPrice']:g} gwei/gas")
    if settings["ethPrice"] is not None:
        caption_parts.append(f"{settings['ethPrice']:.2f} {currency}/eth")

    methods = Table(title="Methods", caption=" · ".join(caption_parts) or None, expand=False)
    methods.add_column("Contract", style="bold")
    methods.add_column("Method", style="yellow")
    for column in ("Min", "Max", "Avg", "# calls"):
        methods.add_column(column, justify="right")
    methods.add_column(f"{currency} (avg)", justify="right", style="green")
    for row in report["methods"]:
        methods.add_row(
            row["contract"], row["method"],
            str(row["min"]), str(row["max"]), str(row["avg"]),
            str(row["calls"]), _format_cost(row["cost"]),
        )

    deployments = Table(title="Deployments", expand=False)
    deployments.add_column("Contract", style="bold")
    for column in ("Min", "Max", "Avg", "% of limit"):
        deployments.add_column(column, justify="right")
    deployments.add_column(f"{currency} (avg)", justify="right", style="green")
    for row in report["deployments"]:
        percent = "-" if row["percentOfLimit"] is None else f"{row['percentOfLimit']} %"
        deployments.add_row(
            row["contract"],
            str(row["min"]), str(row["max"]), str(row["avg"]),
            percent, _format_cost(row["cost"]),
        )

    return [methods, deployments]


def render_report(data, config, gas_price: Optional[float] = None,
                  eth_price: Optional[float] = None, colors: bool = False) -> str:
    """Render the report as text (or JSON when ``config.json_output`` is set)."""
    report = report_to_dict(data, config, gas_price, eth_price)
    if config.json_output:
        return json.dumps(report, indent=2)

    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=REPORT_WIDTH,
        force_terminal=colors,
        no_color=not colors,
        highlight=False,
    )
    for table in build_tables(report):
        console.print(table)
    if not report["methods"] and not report["deployments"]:
        console.print("No gas was attributed to any known contract.")
    return buffer.getvalue()


def write_report(data, config, client=None, stream=None, colors: Optional[bool] = None) -> str:
    """
    Resolve prices, render the report and write it out.

    The report goes to ``config.output_file`` when set (never colored),
    otherwise to ``stream`` (stdout by default). Colors follow ``colors``
    when given, else whether the stream is a terminal.
    """
    gas_price = resolve_gas_price(config, client)
    eth_price = resolve_eth_price(config)

    if config.output_file:
        text = render_report(data, config, gas_price, eth_price, colors=False)
        with open(config.output_file, 'w') as f:
            f.write(text)
        logger.info(f"Gas report written to {config.output_file}")
        return text

    stream = stream or sys.stdout
    if colors is None:
        colors = hasattr(stream, 'isatty') and stream.isatty()
    use_colors = colors and not config.no_colors
    text = render_report(data, config, gas_price, eth_price, colors=use_colors)
    stream.write(text)
    return text
