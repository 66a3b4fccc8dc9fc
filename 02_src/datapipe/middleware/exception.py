"""Aspect turning downstream errors into a failed message status."""

from typing import Any

from ..contracts import NextStep
from ..logging_config import get_logger
from ..models import ExecutionSignal

logger = get_logger(__name__)


class ExceptionAspect:
    """Catches errors from the rest of the chain.

    The message gets status 500 with the error text, and `on_error` is called.
    The error does not propagate further.
    """

    async def execute(
        self, message: Any, signal: ExecutionSignal, next_step: NextStep
    ) -> None:
        try:
            await next_step(message, signal)
        except Exception as exc:
            logger.warning(
                "Pipeline %s failed: %s", message.pipeline_name, exc
            )
            message.fail(500, str(exc))
            if message.on_error:
                message.on_error(message, exc)
