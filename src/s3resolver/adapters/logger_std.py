"""Standard library logging adapter."""

import json
import logging
from typing import Any


class StdLoggerAdapter:
    """LoggerPort implementation on top of :mod:`logging`.

    Keyword fields are appended to the message as a JSON object.
    """

    def __init__(self, name: str = "s3resolver", level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            self.logger.addHandler(handler)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def log_operation(
        self,
        op: str,
        key: str,
        durations: dict[str, float],
        **kwargs: Any,
    ) -> None:
        self.info(f"Operation: {op}", key=key, durations=durations, **kwargs)

    def _log(self, level: int, message: str, fields: dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if fields:
            message = f"{message} - {json.dumps(fields, default=str, sort_keys=True)}"
        self.logger.log(level, message)
