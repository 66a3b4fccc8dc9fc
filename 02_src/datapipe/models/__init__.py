"""Core data models for DataPipe."""

from .message import BaseMessage, PayloadMessage
from .signal import ExecutionSignal
from .telemetry import (
    FilterRole,
    ServiceIdentity,
    TelemetryBatch,
    TelemetryEvent,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryRole,
    TelemetryScope,
)

__all__ = [
    # Messages
    "BaseMessage",
    "PayloadMessage",
    "ExecutionSignal",
    # Telemetry
    "FilterRole",
    "ServiceIdentity",
    "TelemetryBatch",
    "TelemetryEvent",
    "TelemetryOutcome",
    "TelemetryPhase",
    "TelemetryRole",
    "TelemetryScope",
]
