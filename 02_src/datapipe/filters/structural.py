"""Built-in structural filters: composition, branching and looping."""

import inspect
import time
from typing import Any, Callable, Iterable

from ..contracts import IFilter
from ..models import (
    ExecutionSignal,
    FilterRole,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryScope,
)
from ..telemetry.recorder import elapsed_ms, emit, make_event
from .runner import run_filter, run_filters

Predicate = Callable[[Any], bool]


class LambdaFilter:
    """Filter built from a callable `(message, signal)`, sync or async."""

    role = FilterRole.STRUCTURAL

    def __init__(self, fn: Callable[[Any, ExecutionSignal], Any], name: str | None = None):
        self._fn = fn
        self.name = name or "LambdaFilter"

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        result = self._fn(message, signal)
        if inspect.isawaitable(result):
            await result


class Sequence:
    """Runs child filters in order, each with its own telemetry."""

    role = FilterRole.STRUCTURAL

    def __init__(self, *filters: IFilter):
        self._filters = filters

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        await run_filters(self._filters, message, signal)


class ForEach:
    """Runs child filters once per item selected from the message.

    Example:
        ForEach(
            lambda msg: msg.words,
            lambda msg, word: setattr(msg, "current_word", word),
            ConcatenateWord(),
        )
    """

    role = FilterRole.STRUCTURAL

    def __init__(
        self,
        selector: Callable[[Any], Iterable[Any] | None],
        setter: Callable[[Any, Any], None],
        *filters: IFilter,
    ):
        self._selector = selector
        self._setter = setter
        self._filters = filters

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        items = self._selector(message)
        if items is None:
            return

        for item in items:
            if signal.stopped:
                break
            self._setter(message, item)
            await run_filters(self._filters, message, signal)


class IfTrue:
    """Runs child filters only when the predicate holds for the message."""

    role = FilterRole.STRUCTURAL

    def __init__(self, predicate: Predicate, *filters: IFilter):
        self._predicate = predicate
        self._filters = filters

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        if self._predicate(message):
            await run_filters(self._filters, message, signal)


class Switch:
    """Picks the filter to run from the message at invocation time.

    The selector may return None to skip.
    """

    role = FilterRole.STRUCTURAL

    def __init__(self, selector: Callable[[Any], IFilter | None]):
        self._selector = selector

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        selected = self._selector(message)
        if selected is None or signal.stopped:
            return
        await run_filter(selected, message, signal)


class Repeat:
    """Runs child filters over and over until one of them stops the signal.

    The signal is reset afterwards so filters after the loop still run.
    """

    role = FilterRole.STRUCTURAL

    def __init__(self, *filters: IFilter):
        self._filters = filters

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        while not signal.stopped:
            await run_filters(self._filters, message, signal)
        signal.reset()


class RepeatUntil:
    """Runs child filters until the condition holds for the message.

    The condition is checked before the first pass, so nothing runs when it
    already holds. Emits its own Start/End events; the End event carries the
    last condition value as the `condition` attribute.
    """

    role = FilterRole.STRUCTURAL
    emits_own_telemetry = True

    def __init__(self, condition: Predicate, *filters: IFilter):
        self._condition = condition
        self._filters = filters

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        component = type(self).__name__
        emit(
            message,
            make_event(
                message,
                component,
                TelemetryScope.FILTER,
                TelemetryPhase.START,
                role=self.role,
                outcome=TelemetryOutcome.STARTED,
                attributes=signal.take_annotations(),
            ),
        )

        outcome = TelemetryOutcome.SUCCESS
        reason: str | None = None
        error: BaseException | None = None
        condition_met = False
        started = time.perf_counter()
        try:
            condition_met = bool(self._condition(message))
            if not condition_met:
                while not condition_met and not signal.stopped:
                    await run_filters(self._filters, message, signal)
                    condition_met = bool(self._condition(message))
                signal.reset()
        except BaseException as exc:
            outcome = TelemetryOutcome.EXCEPTION
            reason = str(exc)
            error = exc
            raise
        finally:
            signal.annotations.clear()
            emit(
                message,
                make_event(
                    message,
                    component,
                    TelemetryScope.FILTER,
                    TelemetryPhase.END,
                    role=self.role,
                    outcome=outcome,
                    reason=reason,
                    exception=error,
                    duration_ms=elapsed_ms(started),
                    attributes={"condition": condition_met},
                ),
            )


class StopPipeline:
    """Stops the invocation; filters after this one are skipped."""

    role = FilterRole.STRUCTURAL

    def __init__(self, reason: str | None = None):
        self._reason = reason

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        signal.stop(self._reason)
