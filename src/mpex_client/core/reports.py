"""Plain-text rendering of statements, valuations and market data."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from mpex_client.core.market_data import OrderBookSnapshot, VwapTable
from mpex_client.core.money import satoshi_to_btc
from mpex_client.core.statement import CHECKSUM_KEY, CURRENCY_SYMBOL, SELL, Statement
from mpex_client.core.valuation import Portfolio


def format_holdings(stat: Statement) -> str:
    """One line per holding; CxBTC is shown in BTC, instruments as raw counts."""
    lines = []
    for holding in stat.holdings:
        if holding.symbol == CHECKSUM_KEY:
            continue
        amount: Any = holding.quantity
        if holding.symbol == CURRENCY_SYMBOL:
            amount = satoshi_to_btc(holding.quantity)
        lines.append(f"  {holding.symbol}: {amount}\n")
    return "".join(lines)


def format_book(stat: Statement) -> str:
    """One line per open order: instrument, side, quantity, price and order number."""
    lines = []
    for order in stat.book:
        if order.id == CHECKSUM_KEY:
            continue
        detail = order.detail
        lines.append(
            f"  {detail.mpsic}: {detail.side}\t{detail.quantity}\t"
            f"@{satoshi_to_btc(detail.price)}\t(order #{order.id})\n"
        )
    return "".join(lines)


def format_trade_history(stat: Statement) -> str:
    """One line per trade with its UTC time, direction, unit price and total.

    Only the sell code reads as "sold"; every other code reads as "bought".
    """
    lines = []
    for trade in stat.trade_history:
        if trade.id == CHECKSUM_KEY:
            continue
        detail = trade.detail
        verb = "sold" if detail.side == SELL else "bought"
        lines.append(
            f"  {format_timestamp(trade.timestamp)} {detail.mpsic} - {detail.quantity} "
            f"{verb} @{satoshi_to_btc(detail.price)}, "
            f"total: {satoshi_to_btc(detail.total)}\n"
        )
    return "".join(lines)


def format_timestamp(unixtime: int) -> str:
    return datetime.fromtimestamp(unixtime, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S %z")


def _passthrough(section: Sequence[Any]) -> str:
    # A section holding only its checksum entry is empty.
    if len(section) > 1:
        return json.dumps(list(section))
    return ""


def format_statement(stat: Statement, log_path: Path | str) -> str:
    """Render the full account statement."""
    header = stat.header
    return (
        f"Stats for {header.name} (fingerprint {header.fingerprint})\n"
        f"Issued at {header.datetime} ({header.microtime})\n"
        "\n"
        "Holdings:\n"
        f"{format_holdings(stat)}"
        "To which add orders in the book fully paid in advance:\n"
        f"{format_book(stat)}"
        "Options Cover:\n"
        f"  {_passthrough(stat.options_cover)}\n"
        "Futures Cover:\n"
        f"  {_passthrough(stat.futures_cover)}\n"
        "Exercises:\n"
        f"  {_passthrough(stat.exercises)}\n"
        "Your transactions since 1 hour before your last STAT:\n"
        f"{format_trade_history(stat)}"
        "Dividends:\n"
        f"  {_passthrough(stat.dividends)}\n"
        "Formatted STATJSON. If you want the original run 'plain STAT'. "
        f"Logs can be found here: {log_path}.\n"
    )


def format_portfolio(stat: Statement, portfolio: Portfolio) -> str:
    """Render holdings followed by the optimistic and VWAP valuations."""
    return (
        "Holdings:\n"
        f"{format_holdings(stat)}"
        "Totals:\n"
        f"  Your optimistic valuation: {satoshi_to_btc(portfolio.optimistic)}\n"
        f"  VWAP valuation: {satoshi_to_btc(portfolio.vwap_based)}\n"
    )


def format_depth(snapshot: OrderBookSnapshot) -> str:
    """Render the order book, asks from the highest price down, then bids from the lowest up."""
    lines = []
    for symbol, book in snapshot.items():
        lines.append(f"{symbol}\n")
        for price in sorted(book.sell, reverse=True):
            lines.append(f"SELL price: {satoshi_to_btc(price)} amount: {book.sell[price]}\n")
        for price in sorted(book.buy):
            lines.append(f"BUY price: {satoshi_to_btc(price)} amount: {book.buy[price]}\n")
    return "".join(lines)


def format_vwaps(vwaps: VwapTable) -> str:
    lines = []
    for symbol in sorted(vwaps):
        lines.append(f"{symbol}\n")
        for window, stats in vwaps[symbol].items():
            lines.append(
                f"  {window}: avg {satoshi_to_btc(stats.avg)} "
                f"max {satoshi_to_btc(stats.max)} min {satoshi_to_btc(stats.min)}\n"
            )
    return "".join(lines)


__all__ = [
    "format_holdings",
    "format_book",
    "format_trade_history",
    "format_timestamp",
    "format_statement",
    "format_portfolio",
    "format_depth",
    "format_vwaps",
]
