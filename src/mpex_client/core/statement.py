"""Typed records for the exchange's STATJSON reply.

The exchange encodes every section as a list of single-entry mappings, e.g.
``{"Holdings": [{"CxBTC": 1500}, {"S.MPOE": 10}, {"md5Checksum": "..."}]}``.
The parser unwraps each entry exactly once into a record and sets aside the
``md5Checksum`` entry of every section, so nothing downstream has to know
about the wire layout.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

CHECKSUM_KEY = "md5Checksum"
CURRENCY_SYMBOL = "CxBTC"

BUY = "B"
SELL = "S"


class Header(BaseModel):
    """Account header fields."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    fingerprint: str | None = None
    datetime: str | None = None
    microtime: str | None = None


class Holding(BaseModel):
    """Quantity of one instrument; CxBTC is held in satoshi."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    quantity: int


class OrderDetail(BaseModel):
    """Instrument, side, price (satoshi) and quantity of an order or a trade."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    mpsic: str = Field(alias="MPSIC")
    side: str = Field(alias="BS")
    price: int = Field(alias="Price")
    quantity: int = Field(alias="Quantity")

    @property
    def total(self) -> int:
        return self.price * self.quantity


class Order(BaseModel):
    """Open order in the book, tagged with its order number."""

    model_config = ConfigDict(frozen=True)

    id: str
    detail: OrderDetail


class Trade(BaseModel):
    """Executed trade, tagged with its unix timestamp."""

    model_config = ConfigDict(frozen=True)

    id: str
    detail: OrderDetail

    @property
    def timestamp(self) -> int:
        return int(self.id)


class Statement(BaseModel):
    """Parsed STATJSON reply.

    Attributes:
        header: Account name, fingerprint and issue time
        holdings: Instrument holdings, checksum entry excluded
        book: Open orders, checksum entry excluded
        trade_history: Recent trades, checksum entry excluded
        options_cover: Raw ``OptionsCover`` section
        futures_cover: Raw ``IMMCover`` section
        exercises: Raw ``Exercises`` section
        dividends: Raw ``Dividends`` section
        checksums: Section name -> checksum value as sent by the exchange
    """

    model_config = ConfigDict(frozen=True)

    header: Header = Field(default_factory=Header)
    holdings: tuple[Holding, ...] = ()
    book: tuple[Order, ...] = ()
    trade_history: tuple[Trade, ...] = ()
    options_cover: tuple[Any, ...] = ()
    futures_cover: tuple[Any, ...] = ()
    exercises: tuple[Any, ...] = ()
    dividends: tuple[Any, ...] = ()
    checksums: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_json(cls, text: str) -> "Statement":
        """Parse the cleartext of a verified STATJSON reply."""
        return cls.from_dict(json.loads(text))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Statement":
        """Build a statement from the decoded STATJSON mapping.

        Raises:
            ValueError: If a section entry is not a single-entry mapping
            pydantic.ValidationError: If an order or trade lacks a field
        """
        checksums: dict[str, str] = {}

        def entries(section: str) -> Iterator[tuple[str, Any]]:
            for key, value in _single_entries(data.get(section) or [], section):
                if key == CHECKSUM_KEY:
                    checksums[section] = str(value)
                    continue
                yield key, value

        header_fields = dict(entries("Header"))
        header = Header(
            name=_optional_str(header_fields.get("Name")),
            fingerprint=_optional_str(header_fields.get("Fingerprint")),
            datetime=_optional_str(header_fields.get("DateTime")),
            microtime=_optional_str(header_fields.get("Microtime")),
        )
        holdings = tuple(
            Holding(symbol=symbol, quantity=quantity)
            for symbol, quantity in entries("Holdings")
        )
        book = tuple(
            Order(id=order_id, detail=OrderDetail.model_validate(detail))
            for order_id, detail in entries("Book")
        )
        trades = tuple(
            Trade(id=stamp, detail=OrderDetail.model_validate(detail))
            for stamp, detail in entries("TradeHistory")
        )

        return cls(
            header=header,
            holdings=holdings,
            book=book,
            trade_history=trades,
            options_cover=tuple(data.get("OptionsCover") or ()),
            futures_cover=tuple(data.get("IMMCover") or ()),
            exercises=tuple(data.get("Exercises") or ()),
            dividends=tuple(data.get("Dividends") or ()),
            checksums=checksums,
        )


def _single_entries(section: Iterable[Any], name: str) -> Iterator[tuple[str, Any]]:
    for entry in section:
        if not isinstance(entry, dict) or len(entry) != 1:
            raise ValueError(f"{name} entry is not a single-entry mapping: {entry!r}")
        yield next(iter(entry.items()))


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


__all__ = [
    "CHECKSUM_KEY",
    "CURRENCY_SYMBOL",
    "BUY",
    "SELL",
    "Header",
    "Holding",
    "OrderDetail",
    "Order",
    "Trade",
    "Statement",
]
