"""Invoking filters with telemetry and stop-signal checks.

Used both by the pipeline's own filter loop and by structural filters
that run child filters, so nested filters report the same way top-level
ones do.
"""

import time
from typing import Any, Iterable

from ..contracts import IFilter, component_name, emits_own_telemetry, filter_role
from ..models import (
    ExecutionSignal,
    FilterRole,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryScope,
)
from ..telemetry.recorder import elapsed_ms, emit, make_event


async def run_filter(f: IFilter, message: Any, signal: ExecutionSignal) -> None:
    """Invoke one filter between a Start and an End telemetry event.

    Exceptions are recorded and re-raised unchanged.
    """
    component = component_name(f)
    role = filter_role(f)
    self_emitting = emits_own_telemetry(f)

    if not self_emitting:
        emit(
            message,
            make_event(
                message,
                component,
                TelemetryScope.FILTER,
                TelemetryPhase.START,
                role=role,
                outcome=TelemetryOutcome.STARTED,
                # structural filters take over annotations left by their parent
                attributes=(
                    signal.take_annotations()
                    if role == FilterRole.STRUCTURAL
                    else None
                ),
            ),
        )
    message.log(f"INVOKING: {component}")

    outcome = TelemetryOutcome.SUCCESS
    reason: str | None = None
    error: BaseException | None = None
    started = time.perf_counter()
    try:
        await f.execute(message, signal)
    except BaseException as exc:
        outcome = TelemetryOutcome.EXCEPTION
        reason = str(exc)
        error = exc
        raise
    finally:
        duration = elapsed_ms(started)
        if outcome == TelemetryOutcome.SUCCESS and signal.stopped:
            outcome = TelemetryOutcome.STOPPED
            reason = signal.reason

        if not self_emitting:
            emit(
                message,
                make_event(
                    message,
                    component,
                    TelemetryScope.FILTER,
                    TelemetryPhase.END,
                    role=role,
                    outcome=outcome,
                    reason=reason,
                    exception=error,
                    duration_ms=duration,
                    attributes=signal.take_annotations(),
                ),
            )

        if outcome == TelemetryOutcome.STOPPED:
            message.log(f"STOPPED: {reason}")
        message.log(f"COMPLETED: {component} ({duration}ms)")


async def run_filters(
    filters: Iterable[IFilter], message: Any, signal: ExecutionSignal
) -> None:
    """Run filters in order until one stops the signal."""
    for f in filters:
        if signal.stopped:
            return
        await run_filter(f, message, signal)
