"""Route exchange traffic through the relay session when one is connected."""

from __future__ import annotations

import logging
from typing import Any, Callable

from mpex_client.core.market_data import (
    OrderBookSnapshot,
    VwapTable,
    parse_depth,
    parse_vwaps,
)
from mpex_client.errors import MissingRequiredOption, TransportError
from mpex_client.exchange.base import DirectTransport, RelaySession

logger = logging.getLogger(__name__)

VWAP_PATH = "/mpex-vwap.php"
DEPTH_PATH = "/mpex-mktdepth.php"
ORDER_FIELD = "msg"

RELAY_ONLY_NOTICE = "This command only works when connected to irc. Type 'irc' to connect."


class TransportSelector:
    """Pick the relay session or the direct transport for each request.

    The relay session is passed in by the caller, which owns its lifecycle;
    it is used only while ``is_connected()`` reports True.
    """

    def __init__(
        self,
        direct: DirectTransport,
        relay: RelaySession | None = None,
        say: Callable[[str], None] = print,
    ) -> None:
        self.direct = direct
        self.relay = relay
        self.say = say

    @property
    def relay_active(self) -> bool:
        return self.relay is not None and self.relay.is_connected()

    def submit(self, encrypted: str, url: str | None = None) -> str:
        """Deliver an encrypted order and return the encrypted answer.

        Raises:
            MissingRequiredOption: If the direct transport is used without a URL
            TransportError: If the relay session delivered no answer
        """
        if self.relay_active:
            logger.debug("Submitting order through relay session")
            return self._await_reply(
                lambda on_reply: self.relay.send_encrypted(encrypted, on_reply)
            )
        logger.debug("Submitting order over HTTP")
        return self.direct.post_form(self._require_url(url), {ORDER_FIELD: encrypted})

    def fetch_vwaps(self, url: str | None = None) -> VwapTable:
        """Fetch and parse the VWAP table."""
        if self.relay_active:
            raw = self._await_reply(self.relay.vwap)
        else:
            raw = self.direct.get_path(self._require_url(url), VWAP_PATH)
        return parse_vwaps(raw)

    def fetch_depth(self, url: str | None = None) -> OrderBookSnapshot:
        """Fetch and parse the order book depth."""
        if self.relay_active:
            raw = self._await_reply(self.relay.depth)
        else:
            raw = self.direct.get_path(self._require_url(url), DEPTH_PATH)
        return parse_depth(raw)

    def list_proxies(self) -> list[Any] | None:
        """List relay proxies; without a relay session this only prints a notice."""
        if not self.relay_active:
            self.say(RELAY_ONLY_NOTICE)
            return None
        return self._await_reply(self.relay.list_proxies)

    @staticmethod
    def _await_reply(request: Callable[[Callable[[Any], None]], None]) -> Any:
        replies: list[Any] = []

        def on_reply(reply: Any) -> None:
            # Callbacks are one-shot; a duplicate delivery is ignored.
            if not replies:
                replies.append(reply)

        request(on_reply)
        # An empty answer is still an answer; only a callback that never fired fails.
        if not replies:
            raise TransportError("relay session returned no reply")
        return replies[0]

    @staticmethod
    def _require_url(url: str | None) -> str:
        if not url:
            raise MissingRequiredOption("url")
        return url


__all__ = [
    "VWAP_PATH",
    "DEPTH_PATH",
    "ORDER_FIELD",
    "RELAY_ONLY_NOTICE",
    "TransportSelector",
]
