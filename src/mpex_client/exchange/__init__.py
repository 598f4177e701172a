"""Exchange transport layer.

This module provides the transports that carry orders and market data to
the exchange, and the selector that chooses between them.
"""

from mpex_client.exchange.base import DirectTransport, RelaySession
from mpex_client.exchange.http import HttpTransport
from mpex_client.exchange.selector import TransportSelector

__all__ = [
    "DirectTransport",
    "RelaySession",
    "HttpTransport",
    "TransportSelector",
]
