"""Retrying work that failed for environmental reasons."""

from typing import Any, Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from ..contracts import IFilter, IRetryable
from ..logging_config import get_logger
from ..models import ExecutionSignal, FilterRole
from .runner import run_filters

logger = get_logger(__name__)

# Seconds to wait after the given failed attempt
RetryDelay = Callable[[int, Any], float]

TRANSIENT_MARKERS = ("timeout", "deadlocked", "transport-level error")


def is_transient(exc: BaseException) -> bool:
    """True for timeouts and errors that read like a dropped connection or deadlock."""
    if isinstance(exc, TimeoutError):
        return True
    text = str(exc).lower()
    return any(marker in text for marker in TRANSIENT_MARKERS)


def sliding_delay(attempt: int, message: Any) -> float:
    return attempt * 2.0


async def retry_transient(
    run: Callable[[], Awaitable[None]],
    message: Any,
    max_retries: int,
    delay: RetryDelay | None = None,
) -> None:
    """Await `run()`, retrying transient failures up to `max_retries` times.

    Messages exposing the retry capability get `attempt` and `max_retries`
    kept up to date and `on_retrying(attempt)` called before each retry.
    Other errors, and the last transient one, propagate unchanged.
    """
    delay = delay or sliding_delay
    retryable = isinstance(message, IRetryable)
    if retryable:
        message.attempt = 1
        message.max_retries = max_retries

    def wait(retry_state: RetryCallState) -> float:
        return delay(retry_state.attempt_number, message)

    def before_sleep(retry_state: RetryCallState) -> None:
        failed = retry_state.attempt_number
        exc = retry_state.outcome.exception()
        pause = retry_state.next_action.sleep
        logger.warning(
            "Transient failure on attempt %s/%s, retrying in %ss: %s",
            failed,
            max_retries + 1,
            pause,
            exc,
        )
        message.log(f"Transient failure - retrying in {pause}s: {exc}")
        if retryable:
            message.attempt = failed + 1
            if message.on_retrying:
                message.on_retrying(message.attempt)

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        retry=retry_if_exception(is_transient),
        wait=wait,
        before_sleep=before_sleep,
        reraise=True,
    ):
        with attempt:
            await run()


class OnTimeoutRetry:
    """Runs child filters, starting over when they fail transiently."""

    role = FilterRole.STRUCTURAL

    def __init__(self, max_retries: int, *filters: IFilter, delay: RetryDelay | None = None):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._max_retries = max_retries
        self._filters = filters
        self._delay = delay

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        await retry_transient(
            lambda: run_filters(self._filters, message, signal),
            message,
            self._max_retries,
            self._delay,
        )
