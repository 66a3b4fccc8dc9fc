"""Pipeline API routes."""

from typing import Any

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...logging_config import get_logger
from ...models import PayloadMessage

logger = get_logger(__name__)


class PipelineInfo(BaseModel):
    """Response model for a registered pipeline."""

    name: str
    layout: str
    aspects: list[str]
    filters: list[str]
    finally_filters: list[str]


class InvokeRequest(BaseModel):
    """Request model for invoking a pipeline."""

    payload: dict[str, Any] = Field(default_factory=dict)
    actor: str | None = None
    tag: str | None = None


class InvokeResponse(BaseModel):
    """Response model for a pipeline invocation."""

    pipeline_id: str
    stopped: bool
    reason: str | None = None
    status_code: int
    status_message: str
    payload: dict[str, Any]


def create_pipelines_router(app: IApplication) -> APIRouter:
    """Create pipelines router."""
    router = APIRouter(prefix="/api/pipelines", tags=["pipelines"])

    @router.get("", response_model=list[PipelineInfo])
    async def list_pipelines() -> list[dict]:
        """List registered pipelines and their layout."""
        try:
            return [
                {**pipeline.describe(), "layout": str(pipeline)}
                for pipeline in app.pipelines.values()
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/{name}/invoke", response_model=InvokeResponse)
    async def invoke_pipeline(name: str, request: InvokeRequest) -> dict:
        """Run a payload through a registered pipeline."""
        if app.get_pipeline(name) is None:
            raise HTTPException(status_code=404, detail=f"Unknown pipeline: {name}")

        message = PayloadMessage(
            payload=dict(request.payload), actor=request.actor, tag=request.tag
        )
        try:
            signal = await app.invoke(name, message)
        except Exception as e:
            logger.exception("Pipeline %s failed", name)
            raise HTTPException(status_code=500, detail=str(e))

        return {
            "pipeline_id": message.correlation_id,
            "stopped": signal.stopped,
            "reason": signal.reason,
            "status_code": message.status_code,
            "status_message": message.status_message,
            "payload": message.payload,
        }

    return router
