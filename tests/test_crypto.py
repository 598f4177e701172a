"""Tests for the python-gnupg backed crypto capability."""

from unittest.mock import Mock

import gnupg
import pytest
from conftest import FakeExchange

from mpex_client.config import OptionResolver
from mpex_client.errors import CryptoError, SignatureInvalid
from mpex_client.exchange import TransportSelector
from mpex_client.protocol import EnvelopeProtocol, ResponseLog
from mpex_client.protocol.crypto import GnuPGCrypto


def _result(text: str = "", **attrs) -> Mock:
    result = Mock()
    result.__str__ = Mock(return_value=text)
    result.data = text.encode("utf-8")
    result.status = attrs.pop("status", "ok")
    for name, value in attrs.items():
        setattr(result, name, value)
    return result


def test_sign_clearsigns_with_account_key():
    gpg = Mock()
    gpg.sign.return_value = _result("-----BEGIN PGP SIGNED MESSAGE-----")
    crypto = GnuPGCrypto(gpg=gpg)

    assert crypto.sign("STAT", "ABCD", "pw") == "-----BEGIN PGP SIGNED MESSAGE-----"
    gpg.sign.assert_called_once_with("STAT", keyid="ABCD", passphrase="pw", clearsign=True)


def test_sign_failure_raises():
    gpg = Mock()
    gpg.sign.return_value = _result("", status="bad passphrase")

    with pytest.raises(CryptoError, match="bad passphrase"):
        GnuPGCrypto(gpg=gpg).sign("STAT", "ABCD", "wrong")


def test_verify_returns_signed_content():
    gpg = Mock()
    gpg.decrypt.return_value = _result(
        "STATJSON", valid=True, username="Alice", key_id="ABCD", fingerprint="FFFF"
    )

    result = GnuPGCrypto(gpg=gpg).verify("-----BEGIN PGP SIGNED MESSAGE-----")

    assert result.valid is True
    assert result.data == "STATJSON"
    assert "Alice" in result.summary


def test_verify_reports_bad_signature():
    gpg = Mock()
    gpg.decrypt.return_value = _result("x", valid=False, status="signature bad")

    result = GnuPGCrypto(gpg=gpg).verify("tampered")

    assert result.valid is False
    assert "signature bad" in result.summary


def test_encrypt_uses_recipients():
    gpg = Mock()
    gpg.encrypt.return_value = _result("-----BEGIN PGP MESSAGE-----", ok=True)

    assert GnuPGCrypto(gpg=gpg).encrypt("signed", ["MPEX"]) == "-----BEGIN PGP MESSAGE-----"
    gpg.encrypt.assert_called_once_with("signed", ["MPEX"], armor=True, always_trust=True)


def test_encrypt_failure_raises():
    gpg = Mock()
    gpg.encrypt.return_value = _result("", ok=False, status="invalid recipient")

    with pytest.raises(CryptoError, match="invalid recipient"):
        GnuPGCrypto(gpg=gpg).encrypt("signed", ["NOPE"])


def _decrypted(text: str, *status_lines: str) -> gnupg.Crypt:
    """A python-gnupg decrypt result built from gpg status lines."""
    result = gnupg.Crypt(Mock(encoding="utf-8", decode_errors="strict"))
    for line in status_lines:
        key, _, value = line.partition(" ")
        result.handle_status(key, value)
    result.data = text.encode("utf-8")
    return result


def test_decrypt_without_embedded_signature():
    gpg = Mock()
    gpg.decrypt.return_value = _decrypted(
        "clear",
        "ENC_TO 1234ABCD5678EF00 1 0",
        "BEGIN_DECRYPTION",
        "DECRYPTION_OKAY",
        "END_DECRYPTION",
    )

    result = GnuPGCrypto(gpg=gpg).decrypt("cipher", "pw")

    assert result.plaintext == "clear"
    assert result.signature_valid is None
    gpg.decrypt.assert_called_once_with("cipher", passphrase="pw")


def test_decrypt_with_good_embedded_signature():
    gpg = Mock()
    gpg.decrypt.return_value = _decrypted(
        "clear",
        "BEGIN_DECRYPTION",
        "GOODSIG 1234ABCD MPEx",
        "VALIDSIG FFFF 2013-01-01 1357000000 0",
        "DECRYPTION_OKAY",
        "END_DECRYPTION",
    )

    assert GnuPGCrypto(gpg=gpg).decrypt("cipher", "pw").signature_valid is True


@pytest.mark.parametrize(
    "signature_line",
    [
        "BADSIG 1234ABCD Mallory",
        "ERRSIG 1234ABCD 1 2 00 1357000000 9",
        "EXPKEYSIG 1234ABCD MPEx",
    ],
)
def test_decrypt_with_rejected_embedded_signature(signature_line):
    gpg = Mock()
    gpg.decrypt.return_value = _decrypted(
        "clear", "BEGIN_DECRYPTION", "DECRYPTION_OKAY", signature_line, "END_DECRYPTION"
    )

    assert GnuPGCrypto(gpg=gpg).decrypt("cipher", "pw").signature_valid is False


def test_envelope_refuses_reply_with_bad_embedded_signature(tmp_path, app_config):
    gpg = Mock()
    gpg.decrypt.return_value = _decrypted(
        "forged", "BEGIN_DECRYPTION", "DECRYPTION_OKAY", "BADSIG 1234ABCD Mallory", "END_DECRYPTION"
    )
    protocol = EnvelopeProtocol(
        crypto=GnuPGCrypto(gpg=gpg),
        transport=TransportSelector(direct=FakeExchange()),
        resolver=OptionResolver(app_config),
        response_log=ResponseLog(tmp_path / "response.log"),
        say=lambda message: None,
    )

    with pytest.raises(SignatureInvalid):
        protocol.decrypt("cipher", "hunter2")


def test_decrypt_failure_raises():
    gpg = Mock()
    gpg.decrypt.return_value = _result("", ok=False, status="decryption failed")

    with pytest.raises(CryptoError, match="decryption failed"):
        GnuPGCrypto(gpg=gpg).decrypt("cipher", "pw")
