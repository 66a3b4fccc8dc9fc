"""Structured logging configuration for DataPipe.

Two channels are configured:
- application logs: JSON lines to 04_logs/app.log and stdout
- telemetry batches: raw JSONL to 04_logs/telemetry.jsonl, written by the
  `datapipe.telemetry_batches` logger (see StructuredJsonTelemetrySink)
"""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import DEFAULT_LOG_PATH

TELEMETRY_LOGGER = "datapipe.telemetry_batches"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Pipeline context passed via extra={"context": ...}
        if hasattr(record, "context"):
            log_data["context"] = record.context

        return json.dumps(log_data, default=str)


def log_context(message: Any, **extra: Any) -> dict[str, Any]:
    """Correlation fields of a pipeline message, for `extra={"context": ...}`."""
    context = {
        "pipeline_name": getattr(message, "pipeline_name", None),
        "correlation_id": getattr(message, "correlation_id", None),
        "tag": getattr(message, "tag", None),
        "is_telemetry": False,
    }
    context.update(extra)
    return context


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    telemetry_file: str | None = None,
) -> None:
    """
    Setup structured logging for the application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to LOG_LEVEL env var or INFO.
        log_file: Path to log file. Defaults to 04_logs/app.log.
        telemetry_file: Path to the telemetry JSONL file.
                   Defaults to telemetry.jsonl next to the log file.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    if log_file is None:
        log_file = str(DEFAULT_LOG_PATH)

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if telemetry_file is None:
        telemetry_file = str(log_path.parent / "telemetry.jsonl")

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "datapipe.logging_config.JSONFormatter",
            },
            "raw": {
                "format": "%(message)s",
            },
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": log_file,
                "maxBytes": 10 * 1024 * 1024,  # 10 MB
                "backupCount": 5,
                "formatter": "json",
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
            "telemetry": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": telemetry_file,
                "maxBytes": 50 * 1024 * 1024,
                "backupCount": 5,
                "formatter": "raw",
                "encoding": "utf-8",
            },
        },
        "loggers": {
            TELEMETRY_LOGGER: {
                "level": "INFO",
                "handlers": ["telemetry"],
                "propagate": False,
            },
        },
        "root": {
            "level": log_level.upper(),
            "handlers": ["file", "console"],
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
