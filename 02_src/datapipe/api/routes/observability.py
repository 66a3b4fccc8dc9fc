"""Observability API routes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from ...models import TelemetryOutcome


class TelemetryBatchResponse(BaseModel):
    """Response model for a telemetry batch (camelCase wire names)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    pipeline_id: str = Field(alias="pipelineId")
    pipeline_name: str = Field(alias="pipelineName")
    start_time: datetime = Field(alias="startTime")
    end_time: datetime | None = Field(default=None, alias="endTime")
    duration_ms: int = Field(default=0, alias="durationMs")
    outcome: str | None = None
    reason: str | None = None
    events: list[dict[str, Any]] = Field(default_factory=list)


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api/telemetry", tags=["observability"])

    @router.get(
        "/batches",
        response_model=list[TelemetryBatchResponse],
        response_model_exclude_none=True,
    )
    async def get_batches(
        pipeline_name: str | None = Query(None, description="Filter by pipeline"),
        outcome: TelemetryOutcome | None = Query(None, description="Filter by outcome"),
        after: str | None = Query(None, description="ISO timestamp filter"),
        limit: int = Query(100, ge=1, le=1000),
    ) -> list[dict]:
        """Get recorded telemetry batches, newest first."""
        try:
            after_dt = None
            if after:
                try:
                    after_dt = datetime.fromisoformat(after)
                except ValueError:
                    raise HTTPException(
                        status_code=400, detail="Invalid after timestamp format"
                    )

            return await app.storage.get_batches(
                pipeline_name=pipeline_name,
                outcome=outcome,
                after=after_dt,
                limit=limit,
            )

        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get(
        "/batches/{pipeline_id}",
        response_model=TelemetryBatchResponse,
        response_model_exclude_none=True,
    )
    async def get_batch(pipeline_id: str) -> dict:
        """Get one telemetry batch by pipeline id."""
        try:
            batch = await app.storage.get_batch(pipeline_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if batch is None:
            raise HTTPException(status_code=404, detail="Batch not found")
        return batch

    return router
