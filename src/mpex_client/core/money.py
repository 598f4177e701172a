"""Conversion between satoshi integers and BTC display strings."""

from __future__ import annotations

from decimal import Decimal

SATOSHI_PER_BTC = 100_000_000
_PRECISION = Decimal("0.00000001")


def satoshi_to_btc(amount: int | str) -> str:
    """Render a satoshi amount as a BTC string with 8 decimal places.

    Args:
        amount: Amount in satoshi; numeric strings are accepted as the
            exchange sometimes quotes prices as strings

    Returns:
        Decimal string, e.g. ``satoshi_to_btc(150000000) == "1.50000000"``
    """
    value = Decimal(int(amount)) / SATOSHI_PER_BTC
    return f"{value.quantize(_PRECISION):f}"


def btc_to_satoshi(amount: str | Decimal) -> int:
    """Parse a BTC amount back into satoshi.

    Raises:
        ValueError: If the amount has more than 8 decimal places
    """
    value = Decimal(str(amount)) * SATOSHI_PER_BTC
    if value != value.to_integral_value():
        raise ValueError(f"BTC amount {amount} is finer than one satoshi")
    return int(value)


__all__ = ["SATOSHI_PER_BTC", "satoshi_to_btc", "btc_to_satoshi"]
