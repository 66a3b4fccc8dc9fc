"""Telemetry policies, recording and sinks."""

from .options import PolicyOptions, build_policy
from .policies import (
    BusinessOnlyPolicy,
    CaptureEverythingPolicy,
    CompositeTelemetryPolicy,
    ExcludeStartEventsPolicy,
    ITelemetryPolicy,
    MinimumDurationPolicy,
    RolePolicy,
    StructuralOnlyPolicy,
    SuppressAllExceptErrorsPolicy,
)
from .recorder import TelemetryRecorder, elapsed_ms, emit, make_event
from .sinks import (
    ConsoleTelemetrySink,
    ITelemetrySink,
    MemoryTelemetrySink,
    StorageTelemetrySink,
    StructuredJsonTelemetrySink,
)

__all__ = [
    # Policies
    "ITelemetryPolicy",
    "CaptureEverythingPolicy",
    "BusinessOnlyPolicy",
    "StructuralOnlyPolicy",
    "RolePolicy",
    "ExcludeStartEventsPolicy",
    "MinimumDurationPolicy",
    "SuppressAllExceptErrorsPolicy",
    "CompositeTelemetryPolicy",
    "PolicyOptions",
    "build_policy",
    # Recording
    "TelemetryRecorder",
    "elapsed_ms",
    "emit",
    "make_event",
    # Sinks
    "ITelemetrySink",
    "MemoryTelemetrySink",
    "ConsoleTelemetrySink",
    "StructuredJsonTelemetrySink",
    "StorageTelemetrySink",
]
