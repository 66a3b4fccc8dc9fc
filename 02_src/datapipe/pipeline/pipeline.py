"""Pipeline definition and its builder."""

from typing import Any, Callable, Iterable

from ..contracts import IAspect, IFilter, component_name
from ..filters.structural import LambdaFilter
from ..models import ExecutionSignal, ServiceIdentity
from ..telemetry.policies import ITelemetryPolicy
from ..telemetry.sinks import ITelemetrySink
from .executor import PipelineExecutor


class Pipeline:
    """An immutable, ordered chain of filters wrapped by aspects.

    Build one with PipelineBuilder. The same instance may be invoked
    concurrently with distinct messages and signals.
    """

    def __init__(
        self,
        name: str,
        filters: Iterable[IFilter] = (),
        aspects: Iterable[IAspect] = (),
        finally_filters: Iterable[IFilter] = (),
        pre_filter: IFilter | None = None,
        post_filter: IFilter | None = None,
        sink: ITelemetrySink | None = None,
        policy: ITelemetryPolicy | None = None,
        service: ServiceIdentity | None = None,
        debug: bool = False,
    ):
        self._name = name
        self._filters = tuple(filters)
        self._aspects = tuple(aspects)
        self._finally_filters = tuple(finally_filters)
        self._pre_filter = pre_filter
        self._post_filter = post_filter
        self._sink = sink
        self._policy = policy
        self._service = service
        self._debug = debug

    @property
    def name(self) -> str:
        return self._name

    @property
    def filters(self) -> tuple[IFilter, ...]:
        return self._filters

    @property
    def aspects(self) -> tuple[IAspect, ...]:
        return self._aspects

    @property
    def finally_filters(self) -> tuple[IFilter, ...]:
        return self._finally_filters

    @property
    def pre_filter(self) -> IFilter | None:
        return self._pre_filter

    @property
    def post_filter(self) -> IFilter | None:
        return self._post_filter

    @property
    def sink(self) -> ITelemetrySink | None:
        return self._sink

    @property
    def policy(self) -> ITelemetryPolicy | None:
        return self._policy

    @property
    def service(self) -> ServiceIdentity | None:
        return self._service

    @property
    def debug(self) -> bool:
        return self._debug

    async def invoke(
        self, message: Any, signal: ExecutionSignal | None = None
    ) -> ExecutionSignal:
        """Run the message through the pipeline.

        Returns the signal so callers can check whether the run was stopped.
        Filter errors propagate unchanged unless an aspect handles them.
        """
        if signal is None:
            signal = ExecutionSignal()
        await PipelineExecutor(self, message, signal).run()
        return signal

    def describe(self) -> dict[str, Any]:
        """Layout of the pipeline by component name."""
        return {
            "name": self._name,
            "aspects": [component_name(a) for a in self._aspects],
            "filters": [component_name(f) for f in self._filters],
            "finally_filters": [component_name(f) for f in self._finally_filters],
        }

    def __str__(self) -> str:
        names = [component_name(a) for a in self._aspects]
        names += [component_name(f) for f in self._filters]
        return " -> ".join(names)

    def __repr__(self) -> str:
        return f"Pipeline(name={self._name!r}, layout={str(self)!r})"


def _as_filter(candidate: IFilter | Callable[..., Any]) -> IFilter:
    if hasattr(candidate, "execute"):
        return candidate
    if callable(candidate):
        return LambdaFilter(candidate)
    raise TypeError(f"Not a filter or callable: {candidate!r}")


class PipelineBuilder:
    """Collects filters and aspects, then builds an immutable Pipeline.

    Example:
        pipeline = (
            PipelineBuilder("orders")
            .use(ExceptionAspect())
            .add(ValidateOrder(), SaveOrder())
            .finally_(CloseConnection())
            .with_telemetry(MemoryTelemetrySink())
            .build()
        )
    """

    def __init__(self, name: str = "DataPipe"):
        self._name = name
        self._filters: list[IFilter] = []
        self._aspects: list[IAspect] = []
        self._finally_filters: list[IFilter] = []
        self._pre_filter: IFilter | None = None
        self._post_filter: IFilter | None = None
        self._sink: ITelemetrySink | None = None
        self._policy: ITelemetryPolicy | None = None
        self._service: ServiceIdentity | None = None
        self._debug = False

    def add(self, *filters: IFilter | Callable[..., Any]) -> "PipelineBuilder":
        """Append filters; plain callables are wrapped in a LambdaFilter."""
        self._filters.extend(_as_filter(f) for f in filters)
        return self

    def add_if(
        self, condition: bool, if_true: IFilter, if_false: IFilter | None = None
    ) -> "PipelineBuilder":
        if condition:
            self.add(if_true)
        elif if_false is not None:
            self.add(if_false)
        return self

    def use(self, aspect: IAspect) -> "PipelineBuilder":
        """Append an aspect. The first one added runs outermost."""
        self._aspects.append(aspect)
        return self

    def use_if(
        self, condition: bool, if_true: IAspect, if_false: IAspect | None = None
    ) -> "PipelineBuilder":
        if condition:
            self.use(if_true)
        elif if_false is not None:
            self.use(if_false)
        return self

    def pre(self, f: IFilter) -> "PipelineBuilder":
        self._pre_filter = _as_filter(f)
        return self

    def post(self, f: IFilter) -> "PipelineBuilder":
        self._post_filter = _as_filter(f)
        return self

    def finally_(self, f: IFilter) -> "PipelineBuilder":
        """Add a filter that runs after the main filters, even on stop or error."""
        self._finally_filters.append(_as_filter(f))
        return self

    def with_telemetry(
        self, sink: ITelemetrySink, policy: ITelemetryPolicy | None = None
    ) -> "PipelineBuilder":
        self._sink = sink
        self._policy = policy
        return self

    def with_service(self, service: ServiceIdentity) -> "PipelineBuilder":
        self._service = service
        return self

    def debug(self, on: bool = True) -> "PipelineBuilder":
        self._debug = on
        return self

    def build(self) -> Pipeline:
        return Pipeline(
            self._name,
            filters=self._filters,
            aspects=self._aspects,
            finally_filters=self._finally_filters,
            pre_filter=self._pre_filter,
            post_filter=self._post_filter,
            sink=self._sink,
            policy=self._policy,
            service=self._service,
            debug=self._debug,
        )
