"""Public market data published by the exchange: VWAPs and order book depth."""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict

# Depth and VWAP feeds are sometimes served as JSONP, e.g. ``JurovP({...})``.
_CALLBACK_WRAPPER = re.compile(r"^\s*[A-Za-z_$][\w$]*\s*\((?P<payload>.*)\)\s*;?\s*$", re.DOTALL)

DEFAULT_WINDOW = "1d"


class VwapStats(BaseModel):
    """Volume-weighted average price statistics for one window, in satoshi."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    avg: int
    max: int
    min: int


VwapTable = dict[str, dict[str, VwapStats]]


class BookSide(BaseModel):
    """Aggregated depth of one instrument: price (satoshi) -> quantity."""

    model_config = ConfigDict(frozen=True)

    buy: dict[int, int] = {}
    sell: dict[int, int] = {}


OrderBookSnapshot = dict[str, BookSide]


def strip_callback(payload: str) -> str:
    """Return the JSON argument of a ``callback(...)`` wrapper, or the input unchanged."""
    match = _CALLBACK_WRAPPER.match(payload)
    if match is None:
        return payload
    return match.group("payload")


def parse_vwaps(payload: str | dict[str, Any]) -> VwapTable:
    """Parse the VWAP feed into ``symbol -> window -> VwapStats``.

    Windows that do not carry avg/max/min (the feed also publishes volume
    counters) are skipped.
    """
    raw = _load(payload)
    table: VwapTable = {}
    for symbol, windows in (raw or {}).items():
        if not isinstance(windows, dict):
            continue
        table[symbol] = {
            window: VwapStats.model_validate(stats)
            for window, stats in windows.items()
            if isinstance(stats, dict) and stats.keys() >= {"avg", "max", "min"}
        }
    return table


def parse_depth(payload: str | dict[str, Any]) -> OrderBookSnapshot:
    """Parse the market depth feed into ``symbol -> BookSide``."""
    raw = _load(payload)
    snapshot: OrderBookSnapshot = {}
    for symbol, sides in (raw or {}).items():
        snapshot[symbol] = BookSide(
            buy=_levels(sides.get("B")),
            sell=_levels(sides.get("S")),
        )
    return snapshot


def _load(payload: str | dict[str, Any] | None) -> dict[str, Any]:
    if not isinstance(payload, str):
        return payload or {}
    body = strip_callback(payload)
    # A blank feed means no data published yet.
    return json.loads(body) if body.strip() else {}


def _levels(side: Any) -> dict[int, int]:
    if not side:
        return {}
    # Some feed versions send [[price, qty], ...] instead of a mapping.
    items = side.items() if isinstance(side, dict) else side
    return {int(price): int(quantity) for price, quantity in items}


def vwap_price(vwaps: VwapTable, symbol: str, field: str, window: str = DEFAULT_WINDOW) -> int:
    """Look up one VWAP statistic.

    Raises:
        KeyError: If the table has no entry for the symbol or window
    """
    return getattr(vwaps[symbol][window], field)


__all__ = [
    "DEFAULT_WINDOW",
    "VwapStats",
    "VwapTable",
    "BookSide",
    "OrderBookSnapshot",
    "strip_callback",
    "parse_vwaps",
    "parse_depth",
    "vwap_price",
]
