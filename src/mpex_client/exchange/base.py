"""Transport abstractions for reaching the exchange.

Two interchangeable transports carry orders and market data: a direct HTTP
transport and a relay session (a persistent chat connection owned by the
caller). Both are described here as protocols so the selector and the tests
can work against any implementation.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

ReplyCallback = Callable[[str], None]
ProxiesCallback = Callable[[list[Any]], None]


class DirectTransport(Protocol):
    """Request/response transport over HTTP."""

    def post_form(self, url: str, fields: Mapping[str, str]) -> str:
        """POST form-encoded fields to ``url`` and return the response body.

        Raises:
            requests.HTTPError: If the endpoint answers with an error status
        """
        ...

    def get_path(self, url: str, path: str) -> str:
        """GET ``path`` on the host of ``url`` and return the response body."""
        ...


class RelaySession(Protocol):
    """Persistent relay connection that delivers each reply to a one-shot callback.

    Calls block until the callback has fired or the request has failed.
    """

    def is_connected(self) -> bool:
        ...

    def send_encrypted(self, text: str, on_reply: ReplyCallback) -> None:
        ...

    def vwap(self, on_reply: ReplyCallback) -> None:
        ...

    def depth(self, on_reply: ReplyCallback) -> None:
        ...

    def list_proxies(self, on_reply: ProxiesCallback) -> None:
        ...


__all__ = [
    "ReplyCallback",
    "ProxiesCallback",
    "DirectTransport",
    "RelaySession",
]
