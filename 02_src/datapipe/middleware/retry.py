"""Aspect retrying the whole downstream chain on transient failures."""

from typing import Any

from ..contracts import NextStep
from ..filters.retry import RetryDelay, retry_transient
from ..models import ExecutionSignal


class RetryAspect:
    """Re-runs everything after it when it fails with a transient error."""

    def __init__(self, max_retries: int, delay: RetryDelay | None = None):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._max_retries = max_retries
        self._delay = delay

    async def execute(
        self, message: Any, signal: ExecutionSignal, next_step: NextStep
    ) -> None:
        await retry_transient(
            lambda: next_step(message, signal),
            message,
            self._max_retries,
            self._delay,
        )
