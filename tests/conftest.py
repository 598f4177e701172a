"""Pytest configuration shared across the suite."""

from __future__ import annotations

import copy
import json
import re
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import pytest

from mpex_client.config import AppConfig, ExchangeConfig, KeysConfig, OptionResolver
from mpex_client.exchange import TransportSelector
from mpex_client.protocol import DecryptResult, EnvelopeProtocol, ResponseLog, VerifiedResult

ACCOUNT_KEY = "ACCOUNT1"
EXCHANGE_KEY = "MPEX1"
EXCHANGE_URL = "http://mpex.example/index.php"

_SIGNED = re.compile(r"^SIGNED\[(?P<signer>[^\]]*)\]:(?P<body>.*)$", re.DOTALL)
_ENCRYPTED = re.compile(r"^ENC\[(?P<recipients>[^\]]*)\]:(?P<body>.*)$", re.DOTALL)


class FakeCrypto:
    """In-memory stand-in for the OpenPGP capability.

    Signatures are ``SIGNED[<keyid>]:<text>`` and ciphertexts
    ``ENC[<recipients>]:<text>``. Signatures made by a key listed in
    ``bad_signers`` fail verification.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.bad_signers: set[str] = set()
        self.decrypt_signature_valid: bool | None = None

    def sign(self, text: str, keyid: str, passphrase: str) -> str:
        self.calls.append(("sign", keyid, passphrase))
        return f"SIGNED[{keyid}]:{text}"

    def verify(self, text: str) -> VerifiedResult:
        self.calls.append(("verify",))
        match = _SIGNED.match(text)
        if match is None:
            return VerifiedResult(valid=False, summary="no signature found", data=text)
        signer = match.group("signer")
        if signer in self.bad_signers:
            return VerifiedResult(valid=False, summary=f"BAD signature from {signer}", data=match.group("body"))
        return VerifiedResult(valid=True, summary=f"Good signature from {signer}", data=match.group("body"))

    def encrypt(self, text: str, recipients: Sequence[str]) -> str:
        self.calls.append(("encrypt", *recipients))
        return f"ENC[{','.join(recipients)}]:{text}"

    def decrypt(self, text: str, passphrase: str) -> DecryptResult:
        self.calls.append(("decrypt", passphrase))
        match = _ENCRYPTED.match(text)
        assert match is not None, f"not a fake ciphertext: {text!r}"
        return DecryptResult(plaintext=match.group("body"), signature_valid=self.decrypt_signature_valid)


class FakeExchange:
    """Direct transport that answers every order with a signed, encrypted reply."""

    def __init__(self, reply: str = "OK", signer: str = EXCHANGE_KEY, pages: Mapping[str, str] | None = None) -> None:
        self.reply = reply
        self.signer = signer
        self.pages = dict(pages or {})
        self.posts: list[tuple[str, dict[str, str]]] = []
        self.gets: list[tuple[str, str]] = []
        self.on_post: Callable[[], None] | None = None

    def post_form(self, url: str, fields: Mapping[str, str]) -> str:
        self.posts.append((url, dict(fields)))
        if self.on_post is not None:
            self.on_post()
        return f"ENC[{ACCOUNT_KEY}]:SIGNED[{self.signer}]:{self.reply}"

    def get_path(self, url: str, path: str) -> str:
        self.gets.append((url, path))
        return self.pages[path]


class FakeRelay:
    """Relay session that answers synchronously through the callbacks."""

    def __init__(self, connected: bool = True, order_reply: str | None = None,
                 vwap: str | None = None, depth: str | None = None,
                 proxies: list[Any] | None = None) -> None:
        self.connected = connected
        self.order_reply = order_reply
        self.vwap_reply = vwap
        self.depth_reply = depth
        self.proxies = proxies
        self.sent: list[str] = []

    def is_connected(self) -> bool:
        return self.connected

    def send_encrypted(self, text: str, on_reply: Callable[[str], None]) -> None:
        self.sent.append(text)
        if self.order_reply is not None:
            on_reply(self.order_reply)

    def vwap(self, on_reply: Callable[[str], None]) -> None:
        if self.vwap_reply is not None:
            on_reply(self.vwap_reply)

    def depth(self, on_reply: Callable[[str], None]) -> None:
        if self.depth_reply is not None:
            on_reply(self.depth_reply)

    def list_proxies(self, on_reply: Callable[[list[Any]], None]) -> None:
        if self.proxies is not None:
            on_reply(self.proxies)


STAT_DATA: dict[str, Any] = {
    "Header": [
        {"Name": "Alice"},
        {"Fingerprint": "0123456789ABCDEF"},
        {"DateTime": "2013-01-01 00:30:00"},
        {"Microtime": "1357000200.5"},
        {"md5Checksum": "c0"},
    ],
    "Holdings": [
        {"CxBTC": 150000000},
        {"S.MPOE": 1000},
        {"S.DICE": 10},
        {"S.BBET": 5},
        {"O.FOO": 3},
        {"md5Checksum": "c1"},
    ],
    "Book": [
        {"111": {"MPSIC": "S.MPOE", "BS": "B", "Price": "100", "Quantity": "2"}},
        {"222": {"MPSIC": "S.BBET", "BS": "S", "Price": 70, "Quantity": 3}},
        {"md5Checksum": "c2"},
    ],
    "OptionsCover": [{"md5Checksum": "c3"}],
    "IMMCover": [{"md5Checksum": "c4"}],
    "Exercises": [{"md5Checksum": "c5"}],
    "TradeHistory": [
        {"1357000000": {"MPSIC": "S.MPOE", "BS": "S", "Price": 20000, "Quantity": 5}},
        {"1357003600": {"MPSIC": "S.DICE", "BS": "B", "Price": 30000, "Quantity": 2}},
        {"md5Checksum": "c6"},
    ],
    "Dividends": [{"S.MPOE": {"Amount": 5}}, {"md5Checksum": "c7"}],
}

VWAP_DATA: dict[str, Any] = {
    "S.MPOE": {
        "1d": {"avg": 20000, "max": 25000, "min": 15000, "vsize": 1200},
        "7d": {"avg": 21000, "max": 26000, "min": 14000},
    },
    "S.BBET": {"1d": {"avg": 50000, "max": 60000, "min": 40000}},
}


@pytest.fixture
def stat_data() -> dict[str, Any]:
    return copy.deepcopy(STAT_DATA)


@pytest.fixture
def stat_json(stat_data: dict[str, Any]) -> str:
    return json.dumps(stat_data)


@pytest.fixture
def vwap_json() -> str:
    return json.dumps(VWAP_DATA)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        exchange=ExchangeConfig(url=EXCHANGE_URL),
        keys=KeysConfig(keyid=ACCOUNT_KEY, mpexkeyid=EXCHANGE_KEY, password="hunter2"),
    )


@pytest.fixture
def crypto() -> FakeCrypto:
    return FakeCrypto()


@pytest.fixture
def exchange() -> FakeExchange:
    return FakeExchange()


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def make_protocol(crypto: FakeCrypto, exchange: FakeExchange, events: list[str], tmp_path: Path):
    """Build an EnvelopeProtocol around the fakes; operator output goes to ``events``."""

    def _make(config: AppConfig, relay: FakeRelay | None = None,
              prompt: Callable[[str], str] | None = None) -> EnvelopeProtocol:
        resolver = OptionResolver(config, prompt=prompt) if prompt else OptionResolver(config)
        return EnvelopeProtocol(
            crypto=crypto,
            transport=TransportSelector(direct=exchange, relay=relay, say=events.append),
            resolver=resolver,
            response_log=ResponseLog(tmp_path / "response.log"),
            say=events.append,
        )

    return _make


@pytest.fixture
def temp_config_dir(monkeypatch, tmp_path):
    """Point the config service at a temporary directory with a cold cache."""
    import mpex_client.config.service as config_service

    temp_config_path = tmp_path / "config.json"
    monkeypatch.setattr(config_service, "get_config_path", lambda: temp_config_path)
    for name in ("MPEX_URL", "MPEX_KEYID", "MPEX_MPEXKEYID", "MPEX_PASSWORD",
                 "MPEX_TIMEOUT_SECONDS", "GNUPGHOME"):
        monkeypatch.delenv(name, raising=False)
    config_service._APP_CONFIG = None

    yield tmp_path

    config_service._APP_CONFIG = None
