"""Policy construction from configuration options."""

from pydantic import BaseModel, ConfigDict, Field

from ..models import TelemetryRole
from .policies import (
    CompositeTelemetryPolicy,
    ExcludeStartEventsPolicy,
    ITelemetryPolicy,
    MinimumDurationPolicy,
    RolePolicy,
    SuppressAllExceptErrorsPolicy,
)


class PolicyOptions(BaseModel):
    """Recognised telemetry policy options. Unset options add no policy."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    ms: int | None = Field(default=None, ge=0, description="Minimum duration to keep")
    exclude: bool = Field(default=False, description="Drop filter Start events")
    role: TelemetryRole | None = None
    pipeline_name: str | None = Field(
        default=None,
        alias="pipelineName",
        description="Pipeline whose non-error events are suppressed",
    )


def build_policy(options: PolicyOptions) -> ITelemetryPolicy:
    """Compose the policies selected by `options`."""
    policies: list[ITelemetryPolicy] = []

    if options.role is not None:
        policies.append(RolePolicy(options.role))
    if options.exclude:
        policies.append(ExcludeStartEventsPolicy(True))
    if options.ms is not None:
        policies.append(MinimumDurationPolicy(options.ms))
    if options.pipeline_name:
        policies.append(SuppressAllExceptErrorsPolicy(options.pipeline_name))

    return CompositeTelemetryPolicy(*policies)
