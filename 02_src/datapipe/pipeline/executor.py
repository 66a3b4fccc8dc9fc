"""Per-invocation execution of a pipeline."""

import functools
import time
from typing import TYPE_CHECKING, Any

from ..contracts import component_name
from ..filters.runner import run_filters
from ..logging_config import get_logger
from ..models import (
    ExecutionSignal,
    TelemetryBatch,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryScope,
)
from ..telemetry.recorder import TelemetryRecorder, elapsed_ms, emit, make_event

if TYPE_CHECKING:
    from .pipeline import Pipeline

logger = get_logger(__name__)


class PipelineExecutor:
    """Runs one message through a pipeline.

    Holds everything that belongs to a single invocation (the recorder and
    the outcome so far), so the Pipeline itself stays immutable and can be
    invoked concurrently.
    """

    def __init__(self, pipeline: "Pipeline", message: Any, signal: ExecutionSignal):
        self._pipeline = pipeline
        self._message = message
        self._signal = signal
        self._outcome = TelemetryOutcome.NONE
        self._reason: str | None = None

    @property
    def outcome(self) -> TelemetryOutcome:
        return self._outcome

    async def run(self) -> TelemetryBatch:
        """Pre filter, aspects and filters, post filter; then export telemetry."""
        pipeline = self._pipeline
        message = self._message
        signal = self._signal

        previous_name = message.pipeline_name
        message.pipeline_name = pipeline.name
        if message.service is None:
            message.service = pipeline.service

        previous_hook = message.on_telemetry
        recorder = TelemetryRecorder(message, pipeline.policy, forward=previous_hook)
        message.on_telemetry = recorder.record
        try:
            if pipeline.pre_filter is not None:
                await pipeline.pre_filter.execute(message, signal)
            await self._run_aspect(0, message, signal)
            if pipeline.post_filter is not None:
                await pipeline.post_filter.execute(message, signal)
        except BaseException as exc:
            self._outcome = TelemetryOutcome.EXCEPTION
            self._reason = str(exc)
            raise
        finally:
            message.on_telemetry = previous_hook
            batch = recorder.seal(self._outcome, self._reason)
            await self._export(batch)
            # an enclosing pipeline keeps labelling its own events
            message.pipeline_name = previous_name
        return batch

    async def _run_aspect(self, index: int, message: Any, signal: ExecutionSignal) -> None:
        aspects = self._pipeline.aspects
        if index < len(aspects):
            next_step = functools.partial(self._run_aspect, index + 1)
            await aspects[index].execute(message, signal, next_step)
        else:
            await self._run_filters(message, signal)

    async def _run_filters(self, message: Any, signal: ExecutionSignal) -> None:
        pipeline = self._pipeline
        name = pipeline.name

        outcome = TelemetryOutcome.SUCCESS
        reason: str | None = None
        error: BaseException | None = None
        started = time.perf_counter()

        emit(
            message,
            make_event(
                message,
                name,
                TelemetryScope.PIPELINE,
                TelemetryPhase.START,
                outcome=TelemetryOutcome.STARTED,
            ),
        )
        if message.on_start:
            message.on_start(message)
        message.log(f"STARTING: {name}")

        try:
            if pipeline.debug:
                message.log(f"MESSAGE STATE: {message!r}")

            try:
                await run_filters(pipeline.filters, message, signal)
            finally:
                for f in pipeline.finally_filters:
                    message.log(f"FINALLY: {component_name(f)}")
                    await f.execute(message, signal)

            if not signal.stopped and message.on_success:
                message.on_success(message)
        except BaseException as exc:
            outcome = TelemetryOutcome.EXCEPTION
            reason = str(exc)
            error = exc
            raise
        finally:
            if outcome == TelemetryOutcome.SUCCESS and signal.stopped:
                outcome = TelemetryOutcome.STOPPED
                reason = signal.reason

            emit(
                message,
                make_event(
                    message,
                    name,
                    TelemetryScope.PIPELINE,
                    TelemetryPhase.END,
                    outcome=outcome,
                    reason=reason,
                    exception=error,
                    duration_ms=elapsed_ms(started),
                ),
            )
            self._outcome = outcome
            self._reason = reason

            if message.on_complete:
                message.on_complete(message)
            message.log(f"FINISHED: {name} - Outcome: {outcome.value}")

    async def _export(self, batch: TelemetryBatch) -> None:
        sink = self._pipeline.sink
        if sink is None:
            return
        try:
            await sink.export(batch)
        except Exception:
            logger.exception(
                "Telemetry sink %s failed for pipeline %s (%s)",
                type(sink).__name__,
                batch.pipeline_name,
                batch.pipeline_id,
            )
