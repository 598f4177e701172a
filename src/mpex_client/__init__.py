"""MPEx client - submit signed, encrypted orders to the MPEx exchange.

This package provides:
- An OpenPGP signed-envelope protocol for orders and replies
- Direct HTTP and relay-session transports behind one selector
- Statement, order book and VWAP formatting plus portfolio valuation
"""

__version__ = "0.1.0"

# Submodules are imported lazily when accessed
# This avoids circular imports and keeps the package lightweight
__all__ = [
    "core",
    "config",
    "exchange",
    "protocol",
    "cli",
]
