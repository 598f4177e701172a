"""Direct HTTP transport built on requests."""

from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import urlsplit

import requests

logger = logging.getLogger(__name__)


class HttpTransport:
    """Blocking HTTP transport for order submission and market data.

    Attributes:
        timeout: Request timeout in seconds
        session: requests session reused across calls
    """

    def __init__(self, timeout: int = 30, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def post_form(self, url: str, fields: Mapping[str, str]) -> str:
        """POST form-encoded fields and return the response body.

        Raises:
            requests.HTTPError: If the endpoint answers with an error status
            requests.RequestException: On connection failures and timeouts
        """
        logger.debug("POST %s (%d field(s))", url, len(fields))
        response = self.session.post(url, data=dict(fields), timeout=self.timeout)
        response.raise_for_status()
        return response.text

    def get_path(self, url: str, path: str) -> str:
        """GET ``path`` on the scheme and host of ``url``.

        Raises:
            requests.HTTPError: If the endpoint answers with an error status
            requests.RequestException: On connection failures and timeouts
        """
        target = host_url(url, path)
        logger.debug("GET %s", target)
        response = self.session.get(target, timeout=self.timeout)
        response.raise_for_status()
        return response.text


def host_url(url: str, path: str) -> str:
    """Replace the path of ``url`` with ``path``.

    >>> host_url("http://mpex.co/index.php", "/mpex-vwap.php")
    'http://mpex.co/mpex-vwap.php'
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Not an absolute URL: {url!r}")
    return f"{parts.scheme}://{parts.netloc}{path}"


__all__ = ["HttpTransport", "host_url"]
