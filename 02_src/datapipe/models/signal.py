"""Cooperative stop signal for a single pipeline invocation."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExecutionSignal:
    """Stop flag shared by the filters of one invocation.

    This is NOT hard cancellation: a stop only takes effect at the next
    check point between filters.
    """

    stopped: bool = False
    reason: str | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    def stop(self, reason: str | None = None) -> None:
        """Mark the invocation as stopped."""
        self.stopped = True
        self.reason = reason

    def reset(self) -> None:
        """Clear the stop state. Annotations are left untouched."""
        self.stopped = False
        self.reason = None

    def annotate(self, key: str, value: Any) -> None:
        """Attach an attribute to the next filter End event."""
        self.annotations[key] = value

    def take_annotations(self) -> dict[str, Any]:
        """Return a copy of the pending annotations and clear them."""
        taken = dict(self.annotations)
        self.annotations.clear()
        return taken
