"""Configuration models for the MPEx client using Pydantic."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExchangeConfig(BaseModel):
    """Exchange endpoint configuration."""

    model_config = ConfigDict(extra="forbid")

    url: str | None = Field(
        default=None,
        description="MPEx endpoint orders are posted to, e.g. 'http://mpex.co'"
    )
    timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="HTTP request timeout in seconds"
    )


class KeysConfig(BaseModel):
    """OpenPGP key material used to sign and encrypt orders."""

    model_config = ConfigDict(extra="forbid")

    keyid: str | None = Field(
        default=None,
        description="Key id of the account key that signs orders"
    )
    mpexkeyid: str | None = Field(
        default=None,
        description="Key id of the exchange key orders are encrypted to"
    )
    # Read when present but never written back by save_config().
    password: str | None = Field(
        default=None,
        description="Passphrase of the signing key (prompted for when unset)"
    )
    gnupghome: str | None = Field(
        default=None,
        description="GnuPG home directory (None = gpg default)"
    )


class AppConfig(BaseModel):
    """Root application configuration containing all sub-configs."""

    model_config = ConfigDict(extra="forbid")

    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    keys: KeysConfig = Field(default_factory=KeysConfig)
