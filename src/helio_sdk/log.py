"""Structured logging helpers shared by the request executor."""

from __future__ import annotations

import json
import logging
import sys
import threading
from typing import Any, Dict

from .config import LOG_LEVELS, ClientConfig

_stderr_lock = threading.Lock()
_stderr_logger: logging.Logger | None = None


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value: Any) -> None:
        pass


def stderr_logger() -> logging.Logger:
    # Kept out of the logger hierarchy so application handlers are untouched.
    global _stderr_logger
    with _stderr_lock:
        if _stderr_logger is None:
            stderr = logging.Logger("helio.stderr", logging.DEBUG)
            stderr.addHandler(_StderrHandler())
            _stderr_logger = stderr
        return _stderr_logger


def format_event(message: str, data: Dict[str, Any]) -> str:
    payload = {"message": message}
    payload.update(data)
    return json.dumps(payload, default=str, separators=(",", ":"))


def _emit(config: ClientConfig, level: int, message: str, data: Dict[str, Any]) -> None:
    # A caller-supplied logger decides for itself which levels to keep.
    if config.logger is not None:
        config.logger.log(level, format_event(message, data))
        return
    if config.log_level is None or level < LOG_LEVELS[config.log_level]:
        return
    stderr_logger().log(level, format_event(message, data))


def log_debug(config: ClientConfig, message: str, **data: Any) -> None:
    _emit(config, logging.DEBUG, message, data)


def log_info(config: ClientConfig, message: str, **data: Any) -> None:
    _emit(config, logging.INFO, message, data)


def log_error(config: ClientConfig, message: str, **data: Any) -> None:
    _emit(config, logging.ERROR, message, data)


def warn(config: ClientConfig, message: str) -> None:
    """Always shown: on the configured logger, or on stderr regardless of ``log_level``."""
    if config.logger is not None:
        config.logger.warning(message)
    else:
        stderr_logger().warning(message)


__all__ = ["format_event", "log_debug", "log_error", "log_info", "stderr_logger", "warn"]
