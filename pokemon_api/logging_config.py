"""Process-wide logging setup for the Pokemon API.

Env:
    LOG_LEVEL           root level (default INFO); uvicorn/fastapi follow it
    POKEMON_LOG_LEVEL   level of the ``pokemon_api`` loggers (default LOG_LEVEL)
    LOG_FILE_PATH       optional file that receives a copy of every record
"""

import os
import logging
import logging.config
from pathlib import Path
from typing import Dict, Any, List, Tuple

APP_LOGGER = "pokemon_api"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False

_FOLLOW_ROOT = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


def _handlers(log_file: str | None) -> Tuple[Dict[str, Any], List[str]]:
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "std",
        }
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.WatchedFileHandler",
            "filename": log_file,
            "formatter": "std",
        }
    return handlers, list(handlers)


def _build_dict_config(
    log_file: str | None, level: str, app_level: str | None = None
) -> Dict[str, Any]:
    handlers, names = _handlers(log_file)
    loggers: Dict[str, Any] = {
        # records propagate to the root handlers; only the threshold differs
        APP_LOGGER: {"level": app_level or level},
        # SQL statements only at DEBUG
        "sqlalchemy.engine": {"level": "INFO" if level == "DEBUG" else "WARNING"},
    }
    loggers.update({name: {"level": level} for name in _FOLLOW_ROOT})
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"std": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": level, "handlers": names},
    }


def configure_logging() -> None:
    """Apply the logging config once per process; later calls are no-ops."""
    global _configured
    if _configured:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    app_level = (os.getenv("POKEMON_LOG_LEVEL") or "").upper() or None
    log_file = os.getenv("LOG_FILE_PATH") or None

    logging.config.dictConfig(_build_dict_config(log_file, level, app_level))
    _configured = True
