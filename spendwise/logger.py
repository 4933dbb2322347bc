"""
Structured JSON Logging Module.

Every storage log line is one JSON object, written to stdout and to a
size-rotated file whose location, level and rotation come from
``AppConfig`` unless overridden.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO, Union


class JSONFormatter(logging.Formatter):
    """Render a record as ``{"timestamp", "level", "logger_name", "message"}``.

    Anything passed through ``extra=`` lands under an ``"extra"`` key as
    strings; a traceback, when present, under ``"exception"``.
    """

    # Attributes every LogRecord carries; anything else came from ``extra``.
    _RECORD_ATTRS: frozenset[str] = frozenset(
        vars(logging.makeLogRecord({}))
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Union[str, dict[str, str]]] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: str(value)
            for key, value in vars(record).items()
            if key not in self._RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False)


class StructuredLogger:
    """Injectable wrapper around a named ``logging.Logger``.

    Repositories, the identity provider and ``DatabaseManager`` receive one
    of these through their constructor::

        log = StructuredLogger(name="spendwise.storage")
        log.info("Transaction created: %s", created.id, extra={"user_id": uid})

    Handlers are attached once per logger name, so building several
    wrappers for the same name does not duplicate output.
    """

    def __init__(
        self,
        name: str = "spendwise",
        level: Optional[int] = None,
        stream: Optional[TextIO] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        # settings load on first logger, not on import
        from spendwise.config import get_config
        cfg = get_config()

        self._level: int = level if level is not None else cfg.log_level
        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(self._level)

        if not self._logger.handlers:
            self._attach_handlers(
                stream or sys.stdout,
                log_file or cfg.LOG_FILE,
                max_bytes if max_bytes is not None else cfg.LOG_MAX_BYTES,
                backup_count if backup_count is not None else cfg.LOG_BACKUP_COUNT,
            )

    def _attach_handlers(
        self, stream: TextIO, log_file: str, max_bytes: int, backup_count: int
    ) -> None:
        formatter = JSONFormatter()

        console = logging.StreamHandler(stream)
        console.setLevel(self._level)
        console.setFormatter(formatter)
        self._logger.addHandler(console)

        try:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            rotating = RotatingFileHandler(
                filename=str(path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            self._logger.warning(
                "Could not open log file '%s': %s. Logging to console only.",
                log_file,
                exc,
            )
            return
        rotating.setLevel(self._level)
        rotating.setFormatter(formatter)
        self._logger.addHandler(rotating)

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)


def get_logger(name: str = "spendwise") -> StructuredLogger:
    """``StructuredLogger`` for *name* with every setting taken from config."""
    return StructuredLogger(name=name)
