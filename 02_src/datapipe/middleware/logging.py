"""Aspect that writes pipeline progress to a standard logger."""

import logging
from enum import Enum
from typing import Any

from ..contracts import NextStep
from ..logging_config import log_context
from ..models import ExecutionSignal


class LogMode(str, Enum):
    """How much of a run LoggingAspect writes."""

    FULL = "Full"  # start, steps, end, errors
    START_END_ONLY = "StartEndOnly"  # start, end, errors
    ERRORS_ONLY = "ErrorsOnly"


class LoggingAspect:
    """Logs START/END of the run and, in full mode, every message.log line."""

    def __init__(
        self,
        logger: logging.Logger,
        title: str | None = None,
        mode: LogMode = LogMode.FULL,
        level: int = logging.INFO,
    ):
        self._logger = logger
        self._title = title
        self._mode = mode
        self._level = level

    async def execute(
        self, message: Any, signal: ExecutionSignal, next_step: NextStep
    ) -> None:
        title = self._title or type(message).__name__
        context = log_context(message)

        previous = message.on_log
        if self._mode == LogMode.FULL:

            def write(text: str) -> None:
                self._logger.log(self._level, "%s", text, extra={"context": context})
                if previous:
                    previous(text)

            message.on_log = write

        if self._mode != LogMode.ERRORS_ONLY:
            self._logger.log(self._level, "START: %s", title, extra={"context": context})

        try:
            await next_step(message, signal)
        except Exception:
            self._logger.exception(
                "Unhandled exception in pipeline %s",
                message.pipeline_name,
                extra={"context": context},
            )
            raise
        finally:
            message.on_log = previous
            if self._mode != LogMode.ERRORS_ONLY:
                self._logger.log(self._level, "END: %s", title, extra={"context": context})
