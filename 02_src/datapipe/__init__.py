"""DataPipe: composable filter pipelines with policy-driven telemetry."""

from .app import Application, IApplication
from .contracts import IAspect, IFilter, IRetryable, NextStep
from .filters import (
    ForEach,
    IfTrue,
    LambdaFilter,
    OnTimeoutRetry,
    Repeat,
    RepeatUntil,
    Sequence,
    StopPipeline,
    Switch,
)
from .middleware import ExceptionAspect, LoggingAspect, LogMode, RetryAspect
from .models import (
    BaseMessage,
    ExecutionSignal,
    FilterRole,
    PayloadMessage,
    ServiceIdentity,
    TelemetryBatch,
    TelemetryEvent,
    TelemetryOutcome,
    TelemetryPhase,
    TelemetryRole,
    TelemetryScope,
)
from .pipeline import Pipeline, PipelineBuilder
from .storage import IStorage, Storage
from .telemetry import (
    BusinessOnlyPolicy,
    CaptureEverythingPolicy,
    CompositeTelemetryPolicy,
    ConsoleTelemetrySink,
    ExcludeStartEventsPolicy,
    ITelemetryPolicy,
    ITelemetrySink,
    MemoryTelemetrySink,
    MinimumDurationPolicy,
    PolicyOptions,
    RolePolicy,
    StorageTelemetrySink,
    StructuralOnlyPolicy,
    StructuredJsonTelemetrySink,
    SuppressAllExceptErrorsPolicy,
    build_policy,
)

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Pipeline
    "Pipeline",
    "PipelineBuilder",
    "IFilter",
    "IAspect",
    "IRetryable",
    "NextStep",
    # Models
    "BaseMessage",
    "PayloadMessage",
    "ExecutionSignal",
    "FilterRole",
    "ServiceIdentity",
    "TelemetryBatch",
    "TelemetryEvent",
    "TelemetryOutcome",
    "TelemetryPhase",
    "TelemetryRole",
    "TelemetryScope",
    # Filters
    "LambdaFilter",
    "Sequence",
    "ForEach",
    "IfTrue",
    "Switch",
    "Repeat",
    "RepeatUntil",
    "StopPipeline",
    "OnTimeoutRetry",
    # Aspects
    "LoggingAspect",
    "LogMode",
    "ExceptionAspect",
    "RetryAspect",
    # Telemetry
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
    "ITelemetrySink",
    "MemoryTelemetrySink",
    "ConsoleTelemetrySink",
    "StructuredJsonTelemetrySink",
    "StorageTelemetrySink",
    # Storage
    "IStorage",
    "Storage",
]
