"""Command-line client for the MPEx exchange.

Usage:
    mpex stat
    mpex portfolio
    mpex buy S.MPOE 100 0.00012000
    mpex cancel 123456
    mpex plain STAT
    mpex depth
    mpex --url http://mpex.co --keyid ABCD1234 --mpexkeyid F1B69921 plain STATJSON
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Sequence

from mpex_client.config import (
    SEND_OPTIONS,
    AppConfig,
    OptionResolver,
    get_log_path,
    load_config,
)
from mpex_client.core.commands import STATJSON, cancel_command, order_command
from mpex_client.core.money import btc_to_satoshi
from mpex_client.core.reports import (
    format_depth,
    format_portfolio,
    format_statement,
    format_vwaps,
)
from mpex_client.core.statement import Statement
from mpex_client.core.valuation import compute_portfolio
from mpex_client.errors import MissingRequiredOption, MpexError
from mpex_client.exchange import DirectTransport, HttpTransport, RelaySession, TransportSelector
from mpex_client.protocol import CryptoBackend, EnvelopeProtocol, GnuPGCrypto, ResponseLog

logger = logging.getLogger(__name__)


@dataclass
class CliContext:
    """Everything a subcommand needs."""

    protocol: EnvelopeProtocol
    transport: TransportSelector
    resolver: OptionResolver
    log_path: Path
    overrides: dict[str, Any] = field(default_factory=dict)


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging for the CLI.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Set specific levels for noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("gnupg").setLevel(logging.WARNING)


def build_context(
    cfg: AppConfig,
    overrides: dict[str, Any] | None = None,
    *,
    crypto: CryptoBackend | None = None,
    direct: DirectTransport | None = None,
    relay: RelaySession | None = None,
    log_path: Path | None = None,
) -> CliContext:
    """Wire the protocol, transports and option resolver from configuration."""
    log_path = log_path or get_log_path()
    transport = TransportSelector(
        direct=direct or HttpTransport(timeout=cfg.exchange.timeout_seconds),
        relay=relay,
    )
    resolver = OptionResolver(cfg)
    protocol = EnvelopeProtocol(
        crypto=crypto or GnuPGCrypto(gnupghome=cfg.keys.gnupghome),
        transport=transport,
        resolver=resolver,
        response_log=ResponseLog(log_path),
    )
    return CliContext(
        protocol=protocol,
        transport=transport,
        resolver=resolver,
        log_path=log_path,
        overrides=dict(overrides or {}),
    )


def _fetch_statement(ctx: CliContext, opts: dict[str, Any]) -> Statement:
    reply = ctx.protocol.send(STATJSON, opts)
    return Statement.from_json(reply)


def cmd_plain(args: argparse.Namespace, ctx: CliContext) -> None:
    print(ctx.protocol.send(" ".join(args.command), ctx.overrides))


def cmd_stat(args: argparse.Namespace, ctx: CliContext) -> None:
    stat = _fetch_statement(ctx, ctx.overrides)
    print(format_statement(stat, ctx.log_path))


def cmd_portfolio(args: argparse.Namespace, ctx: CliContext) -> None:
    # Resolve once so the passphrase is asked for a single time.
    opts = ctx.resolver.resolve(ctx.overrides, SEND_OPTIONS)
    stat = _fetch_statement(ctx, opts)
    vwaps = ctx.transport.fetch_vwaps(opts["url"])
    portfolio = compute_portfolio(stat, vwaps)
    if portfolio is None:
        logger.info("No VWAP data available, portfolio not computed")
        return
    print(format_portfolio(stat, portfolio))


def cmd_order(args: argparse.Namespace, ctx: CliContext) -> None:
    command = order_command(args.action.upper(), args.mpsic, args.quantity, args.price)
    print(ctx.protocol.send(command, ctx.overrides))


def cmd_cancel(args: argparse.Namespace, ctx: CliContext) -> None:
    print(ctx.protocol.send(cancel_command(args.order_id), ctx.overrides))


def _market_url(ctx: CliContext) -> str | None:
    return ctx.overrides.get("url") or ctx.resolver.get("url")


def cmd_vwap(args: argparse.Namespace, ctx: CliContext) -> None:
    print(format_vwaps(ctx.transport.fetch_vwaps(_market_url(ctx))), end="")


def cmd_depth(args: argparse.Namespace, ctx: CliContext) -> None:
    print(format_depth(ctx.transport.fetch_depth(_market_url(ctx))), end="")


def cmd_proxies(args: argparse.Namespace, ctx: CliContext) -> None:
    proxies = ctx.transport.list_proxies()
    for proxy in proxies or []:
        print(proxy)


def _btc_price(value: str) -> int:
    """argparse type: BTC price string -> satoshi."""
    try:
        return btc_to_satoshi(Decimal(value))
    except (InvalidOperation, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"invalid BTC price {value!r}: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpex",
        description="Send signed and encrypted commands to the MPEx exchange",
    )
    parser.add_argument("--url", help="MPEx endpoint (default: from config)")
    parser.add_argument("--keyid", help="Signing key id (default: from config)")
    parser.add_argument("--mpexkeyid", help="MPEx key id to encrypt to (default: from config)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    sub = parser.add_subparsers(dest="subcommand", required=True)

    plain = sub.add_parser("plain", help="Send a raw command and print the verified reply")
    plain.add_argument("command", nargs="+", help="Command text, e.g. STAT")
    plain.set_defaults(handler=cmd_plain)

    stat = sub.add_parser("stat", help="Show the formatted account statement")
    stat.set_defaults(handler=cmd_stat)

    portfolio = sub.add_parser("portfolio", help="Value holdings and open orders")
    portfolio.set_defaults(handler=cmd_portfolio)

    for action in ("buy", "sell"):
        order = sub.add_parser(action, help=f"Place a {action} order")
        order.add_argument("mpsic", help="Instrument code, e.g. S.MPOE")
        order.add_argument("quantity", type=int, help="Number of units")
        order.add_argument("price", type=_btc_price, help="Unit price in BTC")
        order.set_defaults(handler=cmd_order, action=action)

    cancel = sub.add_parser("cancel", help="Cancel an open order")
    cancel.add_argument("order_id", help="Order number from the statement")
    cancel.set_defaults(handler=cmd_cancel)

    vwap = sub.add_parser("vwap", help="Show VWAP statistics")
    vwap.set_defaults(handler=cmd_vwap)

    depth = sub.add_parser("depth", help="Show order book depth")
    depth.set_defaults(handler=cmd_depth)

    proxies = sub.add_parser("proxies", help="List relay proxies (relay session only)")
    proxies.set_defaults(handler=cmd_proxies)

    return parser


def main(
    argv: Sequence[str] | None = None,
    context_factory: Callable[[AppConfig, dict[str, Any]], CliContext] | None = None,
) -> int:
    """CLI entry point.

    Returns:
        Process exit status: 0 on success, 1 on any client error
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    overrides = {
        key: value
        for key, value in (("url", args.url), ("keyid", args.keyid), ("mpexkeyid", args.mpexkeyid))
        if value
    }

    try:
        cfg = load_config()
        ctx = (context_factory or build_context)(cfg, overrides)
        args.handler(args, ctx)
    except MissingRequiredOption as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except (MpexError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
