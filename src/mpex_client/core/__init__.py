"""Core MPEx client logic.

This package holds the pure parts of the client:
- money: satoshi/BTC conversion
- statement: typed STATJSON records
- market_data: VWAP and depth feeds
- valuation: portfolio valuation
- reports: plain-text rendering
- commands: order command builders
"""

# Submodules can be imported individually as needed
# e.g., from mpex_client.core.valuation import compute_portfolio

__all__ = [
    "money",
    "statement",
    "market_data",
    "valuation",
    "reports",
    "commands",
]
