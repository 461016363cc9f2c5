"""JSON-lines logging for the monitor, plus crash hooks for the UI and sampler threads."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import os
import platform
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


_LOGGER_NAME = "bwmon"
_LOG_FILE = "bwmonitor.log"
_FAULT_FILE = "fault.log"

# Attributes every LogRecord has; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}


def app_root() -> Path:
    system = platform.system()
    if system == "Windows":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming")) / "BandwidthMonitor"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "BandwidthMonitor"
    return Path.home() / ".config" / "bwmonitor"


def log_dir() -> Path:
    path = app_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra=`` fields are carried as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        for key, value in record_fields(record).items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    directory: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Attach file (and optionally console) handlers to the ``bwmon`` logger once."""
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str((directory or log_dir()) / _LOG_FILE),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        logger.addHandler(console_handler)

    logger.info("logging configured", extra={"event": "logging_configured", "keep_files": keep_files})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def _log_crash(event: str, exc_info: tuple, **fields: Any) -> str:
    crash_id = str(uuid.uuid4())
    get_logger().critical(
        f"{event.replace('_', ' ')} crash_id={crash_id}",
        exc_info=exc_info,
        extra={"event": event, "crash_id": crash_id, **fields},
    )
    return crash_id


def install_crash_hooks(directory: Path | None = None) -> None:
    def _excepthook(exc_type, exc_value, exc_tb) -> None:
        _log_crash("uncaught_exception", (exc_type, exc_value, exc_tb))

    def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
        _log_crash(
            "thread_exception",
            (args.exc_type, args.exc_value, args.exc_traceback),
            thread_name=getattr(args.thread, "name", None),
        )

    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook

    fault_file = ((directory or log_dir()) / _FAULT_FILE).open("a", encoding="utf-8")
    faulthandler.enable(file=fault_file, all_threads=True)
    get_logger().info("fault handler enabled", extra={"event": "fault_handler_enabled", "path": fault_file.name})
