"""OpenPGP signed-envelope protocol.

This module provides the round trip that carries commands to the exchange
and brings verified replies back, plus the crypto capability it relies on.
"""

from mpex_client.protocol.crypto import (
    CryptoBackend,
    DecryptResult,
    GnuPGCrypto,
    VerifiedResult,
)
from mpex_client.protocol.envelope import EnvelopeProtocol, track_id
from mpex_client.protocol.response_log import ResponseLog

__all__ = [
    "CryptoBackend",
    "DecryptResult",
    "VerifiedResult",
    "GnuPGCrypto",
    "EnvelopeProtocol",
    "ResponseLog",
    "track_id",
]
