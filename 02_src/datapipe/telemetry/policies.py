"""Telemetry policies deciding which events are kept in a batch."""

from typing import Protocol

from ..models import (
    FilterRole,
    TelemetryEvent,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryRole,
    TelemetryScope,
)


class ITelemetryPolicy(Protocol):
    """Pure predicate over a telemetry event. Must never raise."""

    def should_include(self, event: TelemetryEvent) -> bool:
        """Return True to keep the event."""
        ...


class CaptureEverythingPolicy:
    """Keeps every event. Applied when no other policy is given."""

    def should_include(self, event: TelemetryEvent) -> bool:
        return True


class BusinessOnlyPolicy:
    """Keeps only events from business filters."""

    def should_include(self, event: TelemetryEvent) -> bool:
        return event.role == FilterRole.BUSINESS


class StructuralOnlyPolicy:
    """Keeps only events from structural filters."""

    def should_include(self, event: TelemetryEvent) -> bool:
        return event.role == FilterRole.STRUCTURAL


class RolePolicy:
    """Keeps events of one filter role, plus pipeline-scope events."""

    def __init__(self, role: TelemetryRole):
        self._role = role

    def should_include(self, event: TelemetryEvent) -> bool:
        if self._role == TelemetryRole.ALL:
            return True
        if self._role == TelemetryRole.BUSINESS:
            return (
                event.role == FilterRole.BUSINESS
                or event.scope == TelemetryScope.PIPELINE
            )
        if self._role == TelemetryRole.STRUCTURAL:
            return (
                event.role == FilterRole.STRUCTURAL
                or event.scope == TelemetryScope.PIPELINE
            )
        return False


class ExcludeStartEventsPolicy:
    """Drops filter Start events when enabled.

    Pipeline Start events (no duration yet) are always kept.
    """

    def __init__(self, exclude: bool):
        self._exclude = exclude

    def should_include(self, event: TelemetryEvent) -> bool:
        return (
            not self._exclude
            or (event.scope == TelemetryScope.PIPELINE and event.duration_ms is None)
            or event.phase != TelemetryPhase.START
        )


class MinimumDurationPolicy:
    """Keeps events whose duration is at least `ms` milliseconds.

    Events without a duration (Start events) are dropped.
    """

    def __init__(self, ms: int):
        self._ms = ms

    def should_include(self, event: TelemetryEvent) -> bool:
        return event.duration_ms is not None and event.duration_ms >= self._ms


class SuppressAllExceptErrorsPolicy:
    """Drops the Start/End events of one pipeline unless they record an exception."""

    def __init__(self, pipeline_name: str):
        self._pipeline_name = pipeline_name

    def should_include(self, event: TelemetryEvent) -> bool:
        if (
            event.pipeline_name == self._pipeline_name
            and event.outcome != TelemetryOutcome.EXCEPTION
            and event.phase in (TelemetryPhase.START, TelemetryPhase.END)
        ):
            return False
        return True


class CompositeTelemetryPolicy:
    """Keeps an event only if every member policy keeps it.

    With no members every event is kept.
    """

    def __init__(self, *policies: ITelemetryPolicy):
        self._policies: tuple[ITelemetryPolicy, ...] = policies

    @property
    def policies(self) -> tuple[ITelemetryPolicy, ...]:
        return self._policies

    def should_include(self, event: TelemetryEvent) -> bool:
        return all(policy.should_include(event) for policy in self._policies)
