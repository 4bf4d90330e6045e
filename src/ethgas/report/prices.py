"""
Gas price and market rate lookup for the cost columns of the report.

Prices are optional: when neither configured nor retrievable, the report
simply omits costs.
"""

from typing import Optional

import requests

from ethgas.utils.exceptions import format_exception_message
from ethgas.utils.logging import get_logger

logger = get_logger('prices')

WEI_PER_GWEI = 10 ** 9
GWEI_PER_ETH = 10 ** 9


def resolve_gas_price(config, client=None) -> Optional[float]:
    """Gas price in gwei: the configured value, else the node's ``eth_gasPrice``."""
    if config.gas_price is not None:
        return float(config.gas_price)
    if client is None:
        return None
    try:
        return client.gas_price() / WEI_PER_GWEI
    except Exception as e:
        logger.warning(f"Could not read gas price from node: {format_exception_message(e)}")
        return None


def fetch_eth_price(currency: str, api_url: str, timeout: int = 5) -> Optional[float]:
    """
    Fetch the ETH market rate in ``currency`` from a CoinGecko-style
    ``simple/price`` endpoint.
    """
    currency = currency.lower()
    try:
        response = requests.get(
            api_url,
            params={"ids": "ethereum", "vs_currencies": currency},
            timeout=timeout,
        )
        response.raise_for_status()
        return float(response.json()["ethereum"][currency])
    except (requests.RequestException, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Could not fetch ETH price in {currency}: {e}")
        return None


def resolve_eth_price(config) -> Optional[float]:
    if config.eth_price is not None:
        return float(config.eth_price)
    if not config.price_api_url:
        return None
    return fetch_eth_price(config.currency, config.price_api_url)


def gas_cost(gas: float, gas_price_gwei: Optional[float], eth_price: Optional[float]) -> Optional[float]:
    """Fiat cost of ``gas`` units, or None when a price is unknown."""
    if gas_price_gwei is None or eth_price is None:
        return None
    return gas * gas_price_gwei / GWEI_PER_ETH * eth_price
