"""Portfolio valuation from a statement and the VWAP table.

All amounts are satoshi integers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mpex_client.core.market_data import VwapTable, vwap_price
from mpex_client.core.statement import (
    BUY,
    CHECKSUM_KEY,
    CURRENCY_SYMBOL,
    SELL,
    Statement,
)

logger = logging.getLogger(__name__)

# Holding symbol -> symbol whose 1d average VWAP prices it. S.DICE has
# always been priced off the S.BBET entry; kept until the exchange clarifies.
HOLDING_VWAP_SOURCES: dict[str, str] = {
    "S.MPOE": "S.MPOE",
    "S.DICE": "S.BBET",
    "S.BBET": "S.BBET",
}


@dataclass(slots=True, frozen=True)
class Portfolio:
    """Two valuations of the same account.

    Attributes:
        holdings_value: Approximate value of the holdings alone
        optimistic: Holdings plus every open order at its book price
        vwap_based: Holdings plus buys at cost and sells at the 1d max VWAP
    """

    holdings_value: int
    optimistic: int
    vwap_based: int


def sum_book_value(stat: Statement) -> int:
    """Sum price * quantity over the open orders, regardless of side."""
    return sum(
        order.detail.total for order in stat.book if order.id != CHECKSUM_KEY
    )


def sum_book_value_at_vwap(stat: Statement, vwaps: VwapTable) -> int:
    """Value open orders: buys at cost, sells at the 1d max VWAP.

    Orders with any other side code contribute nothing.

    Raises:
        KeyError: If a sell order's instrument is missing from the VWAP table
    """
    total = 0
    for order in stat.book:
        if order.id == CHECKSUM_KEY:
            continue
        detail = order.detail
        if detail.side == BUY:
            total += detail.price * detail.quantity
        elif detail.side == SELL:
            total += vwap_price(vwaps, detail.mpsic, "max") * detail.quantity
    return total


def average_holdings_value(stat: Statement, vwaps: VwapTable) -> int:
    """Approximate the holdings at the 1d average VWAP.

    CxBTC counts at face value and the instruments in
    :data:`HOLDING_VWAP_SOURCES` are priced from the table. Everything else
    counts as zero, so this is not a full mark-to-market.
    """
    total = 0
    for holding in stat.holdings:
        if holding.symbol == CHECKSUM_KEY:
            continue
        if holding.symbol == CURRENCY_SYMBOL:
            total += holding.quantity
            continue
        source = HOLDING_VWAP_SOURCES.get(holding.symbol)
        if source is not None:
            total += holding.quantity * vwap_price(vwaps, source, "avg")
    return total


def compute_portfolio(stat: Statement | None, vwaps: VwapTable | None) -> Portfolio | None:
    """Compute both valuations, or ``None`` when there is nothing to value against."""
    if stat is None or not vwaps:
        logger.debug("Skipping portfolio valuation: statement or VWAP table unavailable")
        return None

    holdings_value = average_holdings_value(stat, vwaps)
    return Portfolio(
        holdings_value=holdings_value,
        optimistic=holdings_value + sum_book_value(stat),
        vwap_based=holdings_value + sum_book_value_at_vwap(stat, vwaps),
    )


__all__ = [
    "HOLDING_VWAP_SOURCES",
    "Portfolio",
    "sum_book_value",
    "sum_book_value_at_vwap",
    "average_holdings_value",
    "compute_portfolio",
]
