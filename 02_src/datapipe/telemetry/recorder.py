"""Creating telemetry events and collecting them into a batch."""

import time
from datetime import datetime, timezone
from typing import Any, Mapping

from ..logging_config import get_logger
from ..models import (
    FilterRole,
    TelemetryBatch,
    TelemetryEvent,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryScope,
)
from ..models.message import TelemetryHook
from .policies import CaptureEverythingPolicy, ITelemetryPolicy

logger = get_logger(__name__)


def elapsed_ms(started: float) -> int:
    """Whole milliseconds since a `time.perf_counter()` reading."""
    return int((time.perf_counter() - started) * 1000)


def make_event(
    message: Any,
    component: str,
    scope: TelemetryScope,
    phase: TelemetryPhase,
    role: FilterRole = FilterRole.NONE,
    outcome: TelemetryOutcome = TelemetryOutcome.NONE,
    reason: str | None = None,
    exception: BaseException | None = None,
    duration_ms: int | None = None,
    attributes: Mapping[str, Any] | None = None,
) -> TelemetryEvent:
    """Build an event stamped with the message's correlation data."""
    return TelemetryEvent(
        message_id=message.correlation_id,
        component=component,
        pipeline_name=message.pipeline_name,
        service=getattr(message, "service", None),
        actor=getattr(message, "actor", None),
        scope=scope,
        phase=phase,
        role=role,
        outcome=outcome,
        reason=reason,
        exception=exception,
        duration_ms=duration_ms,
        timestamp=datetime.now(timezone.utc),
        attributes=dict(attributes or {}),
    )


def emit(message: Any, event: TelemetryEvent) -> None:
    """Hand an event to the message's telemetry hook, if one is installed."""
    hook = getattr(message, "on_telemetry", None)
    if hook:
        hook(event)


class TelemetryRecorder:
    """Collects the events of one invocation that pass the policy."""

    def __init__(
        self,
        message: Any,
        policy: ITelemetryPolicy | None = None,
        forward: TelemetryHook | None = None,
    ):
        self._policy = policy or CaptureEverythingPolicy()
        self._forward = forward
        self._batch = TelemetryBatch(
            pipeline_id=message.correlation_id,
            pipeline_name=message.pipeline_name,
            start_time=datetime.now(timezone.utc),
            service=getattr(message, "service", None),
            actor=getattr(message, "actor", None),
        )

    @property
    def batch(self) -> TelemetryBatch:
        return self._batch

    def record(self, event: TelemetryEvent) -> None:
        """Keep the event if the policy allows it."""
        if not self._policy.should_include(event):
            logger.debug(
                "Telemetry event dropped by policy: %s %s/%s",
                event.component,
                event.scope.value,
                event.phase.value,
            )
            return
        self._batch.append(event)
        if self._forward:
            self._forward(event)

    def seal(
        self, outcome: TelemetryOutcome, reason: str | None = None
    ) -> TelemetryBatch:
        """Close the batch and return it."""
        self._batch.seal(datetime.now(timezone.utc), outcome, reason)
        return self._batch
