"""Resolution of per-command options against the configuration file."""
from __future__ import annotations

import getpass
import logging
from typing import Any, Callable, Iterable, Mapping

from mpex_client.config.models import AppConfig
from mpex_client.errors import MissingRequiredOption

logger = logging.getLogger(__name__)

PASSPHRASE_OPTION = "password"

# Option name -> (config section, attribute)
_CONFIG_SOURCES: dict[str, tuple[str, str]] = {
    "url": ("exchange", "url"),
    "keyid": ("keys", "keyid"),
    "mpexkeyid": ("keys", "mpexkeyid"),
    "password": ("keys", "password"),
}

SEND_OPTIONS = ("url", "keyid", "mpexkeyid", PASSPHRASE_OPTION)


class OptionResolver:
    """Fill in options the caller did not supply.

    Caller-supplied values win, then the configuration file. A missing
    passphrase is prompted for with input masking; any other missing option
    raises :class:`MissingRequiredOption`.
    """

    def __init__(
        self,
        config: AppConfig,
        prompt: Callable[[str], str] = getpass.getpass,
    ) -> None:
        self.config = config
        self.prompt = prompt

    def get(self, key: str) -> str | None:
        """Look up an option in the configuration file."""
        source = _CONFIG_SOURCES.get(key)
        if source is None:
            return None
        section, attribute = source
        return getattr(getattr(self.config, section), attribute)

    def resolve(
        self, options: Mapping[str, Any], required: Iterable[str]
    ) -> dict[str, Any]:
        """Return a copy of ``options`` with every required option filled in.

        Raises:
            MissingRequiredOption: If a non-secret option cannot be found
        """
        resolved = dict(options)
        for key in required:
            if resolved.get(key):
                continue
            value = self.get(key)
            if value:
                resolved[key] = value
            elif key == PASSPHRASE_OPTION:
                resolved[key] = self.prompt("Enter Passphrase: ")
            else:
                logger.debug("Option %s not supplied and not configured", key)
                raise MissingRequiredOption(key)
        return resolved
