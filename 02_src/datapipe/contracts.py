"""Capabilities a component needs to take part in a pipeline."""

from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

from .models import ExecutionSignal, FilterRole

NextStep = Callable[[Any, ExecutionSignal], Awaitable[None]]


class IFilter(Protocol):
    """A single unit of message-processing logic.

    Filters must keep per-invocation state on the message or the signal,
    never on themselves: one pipeline may run many invocations at once.
    Optional attributes read by the pipeline: `name`, `role` and
    `emits_own_telemetry`.
    """

    async def execute(self, message: Any, signal: ExecutionSignal) -> None:
        """Do the work, mutating the message in place."""
        ...


class IAspect(Protocol):
    """Wraps the whole filter loop to add a cross-cutting concern."""

    async def execute(
        self, message: Any, signal: ExecutionSignal, next_step: NextStep
    ) -> None:
        """Run around `next_step`, which continues down the chain."""
        ...


@runtime_checkable
class IRetryable(Protocol):
    """Retry bookkeeping a message may expose to self-retrying filters."""

    attempt: int
    max_retries: int
    on_retrying: Callable[[int], None] | None


def component_name(component: Any) -> str:
    """Name used for a filter or aspect in telemetry and logs."""
    return getattr(component, "name", None) or type(component).__name__


def filter_role(component: Any) -> FilterRole:
    """Plain filters are business filters unless they say otherwise."""
    return getattr(component, "role", FilterRole.BUSINESS)


def emits_own_telemetry(component: Any) -> bool:
    return bool(getattr(component, "emits_own_telemetry", False))
