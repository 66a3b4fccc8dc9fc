"""Application bootstrap and lifecycle management."""

import os
from typing import Any, Callable, Protocol

from .config import load_policy_options, load_service_identity, resolve_db_path
from .logging_config import get_logger
from .models import ExecutionSignal, ServiceIdentity
from .pipeline import Pipeline, PipelineBuilder
from .storage import IStorage, Storage
from .telemetry import (
    ITelemetryPolicy,
    ITelemetrySink,
    PolicyOptions,
    StorageTelemetrySink,
    build_policy,
)

logger = get_logger(__name__)

# Adds filters and aspects to a builder that already carries the
# application's telemetry sink, policy and service identity
PipelineConfigurator = Callable[[PipelineBuilder], PipelineBuilder]


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Clear recorded telemetry."""
        ...

    @property
    def storage(self) -> IStorage:
        """Storage holding recorded telemetry."""
        ...

    @property
    def pipelines(self) -> dict[str, Pipeline]:
        """Registered pipelines by name."""
        ...

    def get_pipeline(self, name: str) -> Pipeline | None:
        """Get a registered pipeline by name."""
        ...

    async def invoke(self, name: str, message: Any) -> ExecutionSignal:
        """Run a message through a registered pipeline."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        service: ServiceIdentity | None = None,
        policy_options: PolicyOptions | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._service = service
        self._policy_options = policy_options

        self._configurators: dict[str, PipelineConfigurator] = {}

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._sink: ITelemetrySink | None = None
        self._policy: ITelemetryPolicy | None = None
        self._pipelines: dict[str, Pipeline] | None = None

    def register_pipeline(self, name: str, configure: PipelineConfigurator) -> None:
        """Register a pipeline; it is built on start (or now, if already started)."""
        self._configurators[name] = configure
        if self._pipelines is not None:
            self._pipelines[name] = self._build_pipeline(name, configure)
            logger.info("Pipeline %s registered", name)

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Configuration
        if self._service is None:
            self._service = load_service_identity()
        if self._policy_options is None:
            self._policy_options = load_policy_options()
        self._policy = build_policy(self._policy_options)

        # 2. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 3. Telemetry sink (depends on Storage)
        self._sink = StorageTelemetrySink(self._storage)

        # 4. Pipelines (depend on sink + policy)
        self._pipelines = {
            name: self._build_pipeline(name, configure)
            for name, configure in self._configurators.items()
        }
        logger.info(
            "Application started with %s pipeline(s): %s",
            len(self._pipelines),
            ", ".join(self._pipelines) or "-",
        )

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._pipelines = None
        self._sink = None
        if self._storage:
            await self._storage.close()
            self._storage = None
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Clear recorded telemetry."""
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

    def get_pipeline(self, name: str) -> Pipeline | None:
        """Get a registered pipeline by name."""
        return self.pipelines.get(name)

    async def invoke(self, name: str, message: Any) -> ExecutionSignal:
        """Run a message through a registered pipeline."""
        pipeline = self.get_pipeline(name)
        if pipeline is None:
            raise KeyError(f"Unknown pipeline: {name}")
        return await pipeline.invoke(message)

    def _build_pipeline(self, name: str, configure: PipelineConfigurator) -> Pipeline:
        builder = PipelineBuilder(name).with_telemetry(self._sink, self._policy)
        if self._service is not None:
            builder.with_service(self._service)
        return configure(builder).build()

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def pipelines(self) -> dict[str, Pipeline]:
        """Get registered pipelines by name."""
        if self._pipelines is None:
            raise RuntimeError("Application not started")
        return self._pipelines

    @property
    def service(self) -> ServiceIdentity:
        """Get the service identity stamped on telemetry."""
        if self._service is None:
            raise RuntimeError("Application not started")
        return self._service
