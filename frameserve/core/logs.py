# frameserve/core/logs.py
# Console logging for the server process.
from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional

LOGGER = logging.getLogger("frameserve")

# uvicorn loggers share our handler so all output has one format
_SHARED_LOGGERS = ("frameserve", "uvicorn")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "name": record.name,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def resolve_level(verbose: int, quiet: bool, log_level_arg: Optional[str]) -> int:
    """
    Level matrix:
      - --log-level=X: X, regardless of -v/-q
      - -q:   WARNING
      - none: INFO
      - -v:   DEBUG
    """
    if log_level_arg:
        level = logging.getLevelName(log_level_arg.upper())
        if isinstance(level, int):
            return level
        raise ValueError(f"unknown log level: {log_level_arg}")
    if quiet:
        return logging.WARNING
    if verbose >= 1:
        return logging.DEBUG
    return logging.INFO


def setup_logging(level: int = logging.INFO, json_logs: bool = False) -> logging.Logger:
    """Attach a single console handler to the frameserve and uvicorn loggers."""
    handler = logging.StreamHandler()
    handler.setLevel(level)
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        fmt = logging.Formatter(
            "%(asctime)sZ [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        fmt.converter = time.gmtime
        handler.setFormatter(fmt)

    for name in _SHARED_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        for h in list(logger.handlers): logger.removeHandler(h)
        logger.addHandler(handler)

    return LOGGER