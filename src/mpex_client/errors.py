"""Error taxonomy for the MPEx client.

Every error raised by the client on purpose derives from :class:`MpexError`.
HTTP and JSON failures are not wrapped and propagate as raised by
``requests`` and ``json``.
"""

from __future__ import annotations


class MpexError(Exception):
    """Base class for client errors."""


class SignatureInvalid(MpexError):
    """A signature check on an outgoing envelope or an incoming reply failed."""


class MissingRequiredOption(MpexError):
    """A non-secret option is missing from both the caller and the config file."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"--{option} option is required")


class InvalidInstrumentCode(MpexError):
    """An MPSIC does not start with a word character followed by a period."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"invalid MPSIC {code}")


class TransportError(MpexError):
    """The relay session finished a request without delivering a reply."""


class CryptoError(MpexError):
    """The OpenPGP backend failed to sign, encrypt or decrypt."""


__all__ = [
    "MpexError",
    "SignatureInvalid",
    "MissingRequiredOption",
    "InvalidInstrumentCode",
    "TransportError",
    "CryptoError",
]
