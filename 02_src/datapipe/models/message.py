"""Base class for messages flowing through a pipeline."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable

from .telemetry import ServiceIdentity, TelemetryEvent

LogSink = Callable[[str], None]
TelemetryHook = Callable[[TelemetryEvent], None]
MessageHook = Callable[["BaseMessage"], None]
ErrorHook = Callable[["BaseMessage", BaseException], None]


@dataclass
class BaseMessage:
    """Bare minimum state a pipeline needs. Subclass to add your own data."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    pipeline_name: str = ""
    service: ServiceIdentity | None = None
    actor: str | None = None
    tag: Any = None

    # Status (HTTP-like conventions)
    status_code: int = 200
    status_message: str = ""

    # Lifecycle hooks
    on_log: LogSink | None = field(default=None, repr=False)
    on_telemetry: TelemetryHook | None = field(default=None, repr=False)
    on_start: MessageHook | None = field(default=None, repr=False)
    on_success: MessageHook | None = field(default=None, repr=False)
    on_complete: MessageHook | None = field(default=None, repr=False)
    on_error: ErrorHook | None = field(default=None, repr=False)

    @property
    def is_success(self) -> bool:
        return self.status_code < 400

    def fail(self, code: int, message: str) -> None:
        """Record a failure status on the message."""
        self.status_code = code
        self.status_message = message

    def log(self, text: str) -> None:
        """Write a line to the current log sink, if any."""
        if self.on_log:
            self.on_log(text)


@dataclass
class PayloadMessage(BaseMessage):
    """Message carrying a free-form JSON payload, used by the HTTP API."""

    payload: dict[str, Any] = field(default_factory=dict)
