"""Messages, filters and aspects shared by the test modules."""

import asyncio
from dataclasses import dataclass, field
from typing import Callable

from datapipe.contracts import NextStep
from datapipe.models import BaseMessage, ExecutionSignal


@dataclass
class SampleMessage(BaseMessage):
    """Message with a few fields for filters to work on."""

    words: list[str] | None = None
    current_word: str | None = None
    text: str = ""
    count: int = 0
    calls: int = 0
    invoked: list[str] = field(default_factory=list)


@dataclass
class RetryableMessage(SampleMessage):
    """SampleMessage exposing the retry capability."""

    attempt: int = 0
    max_retries: int = 0
    on_retrying: Callable[[int], None] | None = field(default=None, repr=False)


class Record:
    """Appends its name to message.invoked."""

    def __init__(self, name: str):
        self.name = name

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        message.invoked.append(self.name)


class StopWith(Record):
    """Records itself, then stops the run."""

    def __init__(self, name: str, reason: str | None = None):
        super().__init__(name)
        self._reason = reason

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        await super().execute(message, signal)
        signal.stop(self._reason)


class Fail(Record):
    """Records itself, then raises the given error."""

    def __init__(self, name: str, error: BaseException):
        super().__init__(name)
        self.error = error

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        await super().execute(message, signal)
        raise self.error


class Flaky:
    """Fails with `error_factory()` for the first `failures` calls."""

    def __init__(self, failures: int, error_factory: Callable[[], Exception] = TimeoutError):
        self._failures = failures
        self._error_factory = error_factory

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        message.calls += 1
        if message.calls <= self._failures:
            raise self._error_factory()


class Slow:
    def __init__(self, seconds: float):
        self._seconds = seconds

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        await asyncio.sleep(self._seconds)


class Increment:
    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        message.count += 1


class StopWhenCount:
    """Stops once message.count reaches the limit."""

    def __init__(self, limit: int):
        self._limit = limit

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        if message.count >= self._limit:
            signal.stop("limit reached")


class Concatenate:
    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        message.text += message.current_word or ""


class StopOnWord:
    def __init__(self, word: str):
        self._word = word

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        if message.current_word == self._word:
            signal.stop(f"Hit stop word: {self._word}")


class Annotate:
    def __init__(self, key: str, value):
        self._key = key
        self._value = value

    async def execute(self, message: SampleMessage, signal: ExecutionSignal) -> None:
        signal.annotate(self._key, self._value)


class RecordingAspect:
    """Records `<name>:before` and `<name>:after` around the rest of the chain."""

    def __init__(self, name: str):
        self.name = name

    async def execute(
        self, message: SampleMessage, signal: ExecutionSignal, next_step: NextStep
    ) -> None:
        message.invoked.append(f"{self.name}:before")
        try:
            await next_step(message, signal)
        finally:
            message.invoked.append(f"{self.name}:after")


class BrokenSink:
    """Telemetry sink that always fails."""

    def __init__(self):
        self.calls = 0

    async def export(self, batch) -> None:
        self.calls += 1
        raise RuntimeError("sink unavailable")


def no_delay(attempt: int, message) -> float:
    return 0


def summarize(events):
    """(component, scope, phase, outcome) per event, using enum values."""
    return [
        (e.component, e.scope.value, e.phase.value, e.outcome.value) for e in events
    ]
