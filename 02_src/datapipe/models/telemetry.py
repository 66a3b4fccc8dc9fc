"""Telemetry data models and their wire representation."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class FilterRole(str, Enum):
    """What a filter is for."""

    NONE = "None"
    BUSINESS = "Business"
    STRUCTURAL = "Structural"


class TelemetryRole(str, Enum):
    """Role selector used by RolePolicy."""

    ALL = "All"
    BUSINESS = "Business"
    STRUCTURAL = "Structural"


class TelemetryOutcome(str, Enum):
    """Result recorded on a telemetry event."""

    NONE = "None"
    STARTED = "Started"
    SUCCESS = "Success"
    STOPPED = "Stopped"
    EXCEPTION = "Exception"


class TelemetryScope(str, Enum):
    """Whether an event describes a filter or the whole pipeline."""

    FILTER = "Filter"
    PIPELINE = "Pipeline"


class TelemetryPhase(str, Enum):
    """Start or end of a span."""

    START = "Start"
    END = "End"


def _without_nulls(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _exception_to_dict(exc: BaseException) -> dict[str, str]:
    return {"type": type(exc).__name__, "message": str(exc)}


@dataclass(frozen=True)
class ServiceIdentity:
    """Which service emitted the telemetry (informational only)."""

    name: str = ""  # "Orders.Api"
    environment: str = ""  # "Prod", "Staging"
    version: str = ""
    instance_id: str = ""  # machine name / container id

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "environment": self.environment,
            "version": self.version,
            "instanceId": self.instance_id,
        }


@dataclass(frozen=True)
class TelemetryEvent:
    """One phase (start/end) of one scope (filter/pipeline) of execution."""

    message_id: str
    component: str
    pipeline_name: str
    scope: TelemetryScope
    phase: TelemetryPhase
    timestamp: datetime
    role: FilterRole = FilterRole.NONE
    outcome: TelemetryOutcome = TelemetryOutcome.NONE
    service: ServiceIdentity | None = None
    actor: str | None = None
    reason: str | None = None
    exception: BaseException | None = None
    duration_ms: int | None = None  # End events only
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase wire names, dropping nulls."""
        return _without_nulls(
            {
                "messageId": self.message_id,
                "component": self.component,
                "pipelineName": self.pipeline_name,
                "service": self.service.to_dict() if self.service else None,
                "actor": self.actor,
                "role": self.role.value,
                "outcome": self.outcome.value,
                "scope": self.scope.value,
                "phase": self.phase.value,
                "timestamp": self.timestamp.isoformat(),
                "reason": self.reason,
                "exception": (
                    _exception_to_dict(self.exception) if self.exception else None
                ),
                "durationMs": self.duration_ms,
                "attributes": dict(self.attributes),
            }
        )


@dataclass
class TelemetryBatch:
    """All retained events of one pipeline invocation."""

    pipeline_id: str
    pipeline_name: str
    start_time: datetime
    end_time: datetime | None = None
    duration_ms: int = 0
    outcome: TelemetryOutcome | None = None
    reason: str | None = None
    service: ServiceIdentity | None = None
    actor: str | None = None
    events: list[TelemetryEvent] = field(default_factory=list)
    sealed: bool = False

    def append(self, event: TelemetryEvent) -> None:
        """Append an event in emission order."""
        if self.sealed:
            raise RuntimeError("Telemetry batch already sealed")
        self.events.append(event)

    def seal(
        self,
        end_time: datetime,
        outcome: TelemetryOutcome,
        reason: str | None = None,
    ) -> None:
        """Close the batch once the invocation has ended."""
        self.end_time = end_time
        self.duration_ms = int((end_time - self.start_time).total_seconds() * 1000)
        self.outcome = None if outcome == TelemetryOutcome.NONE else outcome
        # A reason only means something when the run did not succeed
        if outcome == TelemetryOutcome.SUCCESS or not (reason and reason.strip()):
            self.reason = None
        else:
            self.reason = reason
        self.sealed = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase wire names, dropping nulls."""
        return _without_nulls(
            {
                "pipelineId": self.pipeline_id,
                "pipelineName": self.pipeline_name,
                "startTime": self.start_time.isoformat(),
                "endTime": self.end_time.isoformat() if self.end_time else None,
                "durationMs": self.duration_ms,
                "outcome": self.outcome.value if self.outcome else None,
                "reason": self.reason,
                "service": self.service.to_dict() if self.service else None,
                "actor": self.actor,
                "events": [event.to_dict() for event in self.events],
            }
        )

    def to_json(self, indent: int | None = None) -> str:
        # attribute values are open-ended; anything json cannot encode goes as str
        return json.dumps(self.to_dict(), indent=indent, default=str)
