"""Configuration management package for the MPEx client.

Usage:
    from mpex_client.config import load_config, save_config

    cfg = load_config()
    print(cfg.exchange.url)
    print(cfg.keys.keyid)

    # Modify and save
    cfg.exchange.url = "http://mpex.co"
    save_config(cfg)
"""

from mpex_client.config.models import AppConfig, ExchangeConfig, KeysConfig
from mpex_client.config.resolver import SEND_OPTIONS, OptionResolver
from mpex_client.config.service import (
    get_config_path,
    get_log_path,
    load_config,
    reload_config,
    save_config,
)

__all__ = [
    # Models
    "ExchangeConfig",
    "KeysConfig",
    "AppConfig",
    # Service functions
    "get_config_path",
    "get_log_path",
    "load_config",
    "save_config",
    "reload_config",
    # Option resolution
    "OptionResolver",
    "SEND_OPTIONS",
]
