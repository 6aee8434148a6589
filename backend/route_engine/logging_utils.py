from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "route_engine"

# Searches may run on several threads; handler setup must happen once.
_SETUP_LOCK = threading.Lock()
_LOGGER: logging.Logger | None = None


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _log_file_path(configured: str, out_dir: str) -> Path | None:
    raw = configured.strip()
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_absolute() else Path(out_dir) / path


def _attach_handlers(logger: logging.Logger) -> None:
    formatter = jsonlogger.JsonFormatter()

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    log_path = _log_file_path(settings.route_log_file, settings.out_dir)
    if log_path is None:
        return
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as exc:
        # The file sink is optional; keep stderr and report why it is missing.
        logger.warning(
            "route_log_file_unavailable",
            extra={"event": "route_log_file_unavailable", "path": str(log_path), "error": str(exc)},
        )
        return
    sink.setFormatter(formatter)
    logger.addHandler(sink)


def get_logger() -> logging.Logger:
    """The shared ``route_engine`` logger, configured on first use."""
    global _LOGGER
    logger = _LOGGER
    if logger is not None:
        return logger
    with _SETUP_LOCK:
        if _LOGGER is None:
            logger = logging.getLogger(LOGGER_NAME)
            logger.setLevel(_parse_level(settings.log_level))
            logger.propagate = False
            _attach_handlers(logger)
            _LOGGER = logger
        return _LOGGER


def reset_logger() -> None:
    """Close and drop the handlers so the next ``get_logger`` re-reads settings."""
    global _LOGGER
    with _SETUP_LOCK:
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _LOGGER = None


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    # The event name is both the message and a top-level JSON key.
    get_logger().log(level, event, extra={"event": event, **fields})
