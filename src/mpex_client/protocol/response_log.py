"""Append-only log of decrypted exchange replies."""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "mpex_client.responses"


class ResponseLog:
    """One INFO entry per decrypted reply, written to a single growing file.

    The file handler is opened on the first append and reused afterwards.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._logger: logging.Logger | None = None

    def append(self, text: str) -> None:
        self._get_logger().info(text)

    def close(self) -> None:
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)
        self._logger = None

    def _get_logger(self) -> logging.Logger:
        if self._logger is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Scope the logger to the file so two logs never share a handler.
            response_logger = logging.getLogger(f"{LOGGER_NAME}.{self.path.stem}.{id(self)}")
            response_logger.setLevel(logging.INFO)
            response_logger.propagate = False
            handler = logging.FileHandler(self.path, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            response_logger.addHandler(handler)
            self._logger = response_logger
        return self._logger


__all__ = ["ResponseLog"]
