"""OpenPGP capability used by the envelope protocol.

The protocol only needs four operations, described by :class:`CryptoBackend`.
:class:`GnuPGCrypto` implements them on top of the local ``gpg`` binary via
python-gnupg.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

import gnupg

from mpex_client.errors import CryptoError

logger = logging.getLogger(__name__)

# Problem statuses python-gnupg records for a signature it could not accept.
_SIGNATURE_PROBLEMS = frozenset({
    "signature bad",
    "signature error",
    "signature expired",
    "no public key",
    "signing key has expired",
    "signing key was revoked",
})


@dataclass(slots=True, frozen=True)
class VerifiedResult:
    """Outcome of a signature check.

    Attributes:
        valid: Whether the embedded signature is good
        summary: Human-readable signature description for the operator
        data: Signed content with the armor stripped
    """

    valid: bool
    summary: str
    data: str


@dataclass(slots=True, frozen=True)
class DecryptResult:
    """Outcome of a decryption.

    Attributes:
        plaintext: Decrypted content
        signature_valid: Result of the signature check performed while
            decrypting, or None when the message carried no signature
    """

    plaintext: str
    signature_valid: bool | None = None


class CryptoBackend(Protocol):
    """OpenPGP operations the envelope protocol delegates to."""

    def sign(self, text: str, keyid: str, passphrase: str) -> str:
        """Clear-sign ``text`` and return the armored result."""
        ...

    def verify(self, text: str) -> VerifiedResult:
        """Check the signature embedded in clear-signed ``text``."""
        ...

    def encrypt(self, text: str, recipients: Sequence[str]) -> str:
        """Encrypt ``text`` to the recipients and return ASCII armor."""
        ...

    def decrypt(self, text: str, passphrase: str) -> DecryptResult:
        """Decrypt an armored message."""
        ...


class GnuPGCrypto:
    """CryptoBackend backed by the local GnuPG keyring."""

    def __init__(self, gnupghome: str | None = None, gpg: gnupg.GPG | None = None) -> None:
        self.gpg = gpg or gnupg.GPG(gnupghome=gnupghome)

    def sign(self, text: str, keyid: str, passphrase: str) -> str:
        result = self.gpg.sign(text, keyid=keyid, passphrase=passphrase, clearsign=True)
        if not result.data:
            raise CryptoError(f"Signing with key {keyid} failed: {result.status}")
        return str(result)

    def verify(self, text: str) -> VerifiedResult:
        # gpg --decrypt on a clear-signed message checks the signature and
        # emits the signed content, which --verify alone does not return.
        result = self.gpg.decrypt(text)
        if result.valid:
            summary = (
                f"Good signature from {result.username} "
                f"(key {result.key_id}, fingerprint {result.fingerprint})"
            )
        else:
            summary = f"Bad signature: {result.status}"
        return VerifiedResult(valid=bool(result.valid), summary=summary, data=str(result))

    def encrypt(self, text: str, recipients: Sequence[str]) -> str:
        result = self.gpg.encrypt(text, list(recipients), armor=True, always_trust=True)
        if not result.ok:
            raise CryptoError(f"Encryption to {', '.join(recipients)} failed: {result.status}")
        return str(result)

    def decrypt(self, text: str, passphrase: str) -> DecryptResult:
        result = self.gpg.decrypt(text, passphrase=passphrase)
        if not result.ok:
            raise CryptoError(f"Decryption failed: {result.status}")
        return DecryptResult(plaintext=str(result), signature_valid=_embedded_signature_valid(result))


def _embedded_signature_valid(result: gnupg.Crypt) -> bool | None:
    # DECRYPTION_OKAY overwrites status and ENC_TO sets key_id, so only valid
    # and the recorded problems tell a signed reply from an unsigned one.
    if result.valid:
        return True
    if any(problem.get("status") in _SIGNATURE_PROBLEMS for problem in result.problems):
        return False
    return None


__all__ = ["VerifiedResult", "DecryptResult", "CryptoBackend", "GnuPGCrypto"]
