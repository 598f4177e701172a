"""Builders for the pipe-delimited plaintext commands the exchange accepts."""

from __future__ import annotations

import re
from typing import Literal

from mpex_client.errors import InvalidInstrumentCode

STAT = "STAT"
STATJSON = "STATJSON"

_MPSIC = re.compile(r"^\w\.")

OrderAction = Literal["BUY", "SELL"]


def validate_mpsic(mpsic: str) -> str:
    """Return the MPSIC unchanged if it starts with a word character and a period.

    Raises:
        InvalidInstrumentCode: If the code has any other shape
    """
    if not _MPSIC.match(mpsic):
        raise InvalidInstrumentCode(mpsic)
    return mpsic


def order_command(action: OrderAction, mpsic: str, quantity: int, price: int) -> str:
    """Build ``BUY|S.MPOE|100|12000``; the price is in satoshi per unit.

    Raises:
        InvalidInstrumentCode: If the MPSIC is malformed
        ValueError: If quantity or price is not positive
    """
    validate_mpsic(mpsic)
    if quantity <= 0:
        raise ValueError(f"quantity must be positive, got {quantity}")
    if price <= 0:
        raise ValueError(f"price must be positive, got {price}")
    return f"{action}|{mpsic}|{quantity}|{price}"


def cancel_command(order_id: str) -> str:
    if not order_id.isdigit():
        raise ValueError(f"order id must be numeric, got {order_id!r}")
    return f"CANCEL|{order_id}"


__all__ = [
    "STAT",
    "STATJSON",
    "OrderAction",
    "validate_mpsic",
    "order_command",
    "cancel_command",
]
