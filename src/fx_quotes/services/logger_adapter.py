from __future__ import annotations

import logging
from typing import Protocol


class LoggerAdapter(Protocol):
    def log_information(self, template: str, *args: object) -> None: ...


class StdlibLoggerAdapter(LoggerAdapter):
    """Forwards structured log calls to a ``logging.Logger``.

    ``template`` uses ``%``-style placeholders and is formatted lazily by the
    logging machinery, so the arguments stay available on the ``LogRecord``.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("fx_quotes")

    def log_information(self, template: str, *args: object) -> None:
        self._logger.info(template, *args)


__all__ = ["LoggerAdapter", "StdlibLoggerAdapter"]
