"""Configuration service for loading and saving AppConfig."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from mpex_client.config.models import AppConfig, ExchangeConfig, KeysConfig

# Global cache for config (loaded once per process)
_APP_CONFIG: AppConfig | None = None

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the client's home directory (~/.mpex), creating it if needed."""
    config_dir = Path.home() / ".mpex"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get path to the configuration file.

    Returns:
        Path to ~/.mpex/config.json
    """
    return get_config_dir() / "config.json"


def get_log_path() -> Path:
    """Get path to the decrypted response log, next to the config file."""
    return get_config_path().parent / "response.log"


def _load_from_env() -> AppConfig:
    """Load configuration from environment variables.

    This is used when config.json doesn't exist yet.

    Returns:
        AppConfig populated from environment variables
    """
    exchange_config = ExchangeConfig(
        url=os.getenv("MPEX_URL"),
        timeout_seconds=int(os.getenv("MPEX_TIMEOUT_SECONDS", "30")),
    )

    keys_config = KeysConfig(
        keyid=os.getenv("MPEX_KEYID"),
        mpexkeyid=os.getenv("MPEX_MPEXKEYID"),
        password=os.getenv("MPEX_PASSWORD"),
        gnupghome=os.getenv("GNUPGHOME"),
    )

    return AppConfig(exchange=exchange_config, keys=keys_config)


def load_config() -> AppConfig:
    """Load application configuration.

    Loading priority:
    1. If already cached in memory, return cached instance
    2. If config.json exists, load from file
    3. Otherwise, create from environment variables and save to file

    Returns:
        AppConfig instance

    Raises:
        ValueError: If config file is invalid JSON
        pydantic.ValidationError: If config data doesn't match schema
    """
    global _APP_CONFIG

    if _APP_CONFIG is not None:
        return _APP_CONFIG

    config_path = get_config_path()

    if config_path.exists():
        try:
            logger.info("Loading configuration from %s", config_path)
            with open(config_path, encoding="utf-8") as f:
                data: Dict[str, Any] = json.load(f)
            _APP_CONFIG = AppConfig(**data)
            logger.info("Configuration loaded successfully")
            return _APP_CONFIG
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse config file %s: %s", config_path, exc)
            raise ValueError(f"Invalid configuration file: {exc}") from exc

    logger.info("No config file found, creating from environment variables")
    app_config = _load_from_env()
    save_config(app_config)
    # Keep a passphrase taken from the environment for this process only.
    _APP_CONFIG = app_config

    return _APP_CONFIG


def save_config(app_config: AppConfig) -> None:
    """Save configuration to file, leaving the passphrase out.

    Args:
        app_config: AppConfig instance to save

    Raises:
        IOError: If file cannot be written
    """
    global _APP_CONFIG

    config_path = get_config_path()

    data = app_config.model_dump(mode="json", exclude={"keys": {"password"}})

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    _APP_CONFIG = app_config

    logger.info("Configuration saved to %s", config_path)


def reload_config() -> AppConfig:
    """Reload configuration from file, clearing the cache.

    Returns:
        AppConfig instance loaded from file

    Raises:
        ValueError: If config file doesn't exist or is invalid
    """
    global _APP_CONFIG

    config_path = get_config_path()

    if not config_path.exists():
        raise ValueError(f"Configuration file not found: {config_path}")

    _APP_CONFIG = None

    return load_config()
