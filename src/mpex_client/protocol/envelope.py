"""Signed-envelope protocol for talking to the exchange.

An order travels as a clear-signed message encrypted to the exchange key;
the exchange answers with a clear-signed reply encrypted to the account key.
:class:`EnvelopeProtocol` runs that round trip:

    sign -> self-verify -> track id -> encrypt -> submit
         -> decrypt -> log -> verify -> cleartext reply

Any failure aborts the round trip and nothing is retried. The decrypted
reply is written to the response log before its signature is checked, so a
record survives even a reply that fails verification.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, Mapping

from mpex_client.config.resolver import SEND_OPTIONS, OptionResolver
from mpex_client.errors import SignatureInvalid
from mpex_client.exchange.selector import TransportSelector
from mpex_client.protocol.crypto import CryptoBackend, VerifiedResult
from mpex_client.protocol.response_log import ResponseLog

logger = logging.getLogger(__name__)

INVALID_SIGNATURE_WARNING = "WARNING: Invalid signature! Don't trust!"


def track_id(signed_text: str) -> str:
    """Short operator-facing id of a signed envelope: the first 4 hex digits of its MD5."""
    return hashlib.md5(signed_text.encode("utf-8")).hexdigest()[:4]


class EnvelopeProtocol:
    """Sign, encrypt, submit and verify exchange commands.

    Attributes:
        crypto: OpenPGP capability
        transport: Selector choosing the relay session or HTTP
        resolver: Fills in url, key ids and passphrase
        response_log: Receives every decrypted reply
        say: Writes operator-facing status lines
    """

    def __init__(
        self,
        crypto: CryptoBackend,
        transport: TransportSelector,
        resolver: OptionResolver,
        response_log: ResponseLog,
        say: Callable[[str], None] = print,
    ) -> None:
        self.crypto = crypto
        self.transport = transport
        self.resolver = resolver
        self.response_log = response_log
        self.say = say

    def sign(self, command: str, keyid: str, passphrase: str) -> str:
        """Clear-sign a command and check the signature before handing it out.

        Raises:
            SignatureInvalid: If the fresh signature does not verify
        """
        signed = self.crypto.sign(command, keyid, passphrase)
        self.verify(signed)
        return signed

    def verify(self, text: str) -> VerifiedResult:
        """Check the signature of clear-signed text and report it to the operator.

        Raises:
            SignatureInvalid: If the signature is bad
        """
        result = self.crypto.verify(text)
        if not result.valid:
            self.say(INVALID_SIGNATURE_WARNING)
            logger.warning("Signature check failed: %s", result.summary)
            raise SignatureInvalid(INVALID_SIGNATURE_WARNING)
        self.say(result.summary)
        return result

    def encrypt(self, signed: str, recipient: str) -> str:
        return self.crypto.encrypt(signed, [recipient])

    def decrypt(self, encrypted: str, passphrase: str) -> str:
        """Decrypt a reply.

        Raises:
            SignatureInvalid: If a signature checked during decryption is bad
        """
        result = self.crypto.decrypt(encrypted, passphrase)
        if result.signature_valid is False:
            raise SignatureInvalid("Signature could not be verified")
        return result.plaintext

    def send(self, command: str, options: Mapping[str, Any] | None = None) -> str:
        """Run one signed and encrypted round trip with the exchange.

        Args:
            command: Plaintext command, e.g. ``STATJSON``
            options: Caller overrides for url, keyid, mpexkeyid and password

        Returns:
            Verified cleartext of the exchange's reply

        Raises:
            MissingRequiredOption: If url or a key id is not configured
            SignatureInvalid: If the order or the reply fails a signature check
            TransportError: If the relay session delivered no reply
            requests.RequestException: If the HTTP submission fails
        """
        self.say(f"Sending order to MPEX: {command}")

        opts = self.resolver.resolve(options or {}, SEND_OPTIONS)

        signed = self.sign(command, opts["keyid"], opts["password"])
        self.say(f"Track-ID: {track_id(signed)}")
        encrypted = self.encrypt(signed, opts["mpexkeyid"])

        answer = self.transport.submit(encrypted, opts["url"])
        return self.handle_answer(answer, opts["password"])

    def handle_answer(self, encrypted_answer: str, passphrase: str) -> str:
        """Decrypt, log and verify an encrypted reply; return its cleartext."""
        decrypted = self.decrypt(encrypted_answer, passphrase)

        self.response_log.append(decrypted)

        return self.verify(decrypted).data


__all__ = ["INVALID_SIGNATURE_WARNING", "track_id", "EnvelopeProtocol"]
