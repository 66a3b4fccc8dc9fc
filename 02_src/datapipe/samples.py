"""Sample pipelines registered by the service entry point."""

from typing import Any

from .app import Application
from .logging_config import get_logger
from .middleware import ExceptionAspect, LoggingAspect, LogMode
from .models import ExecutionSignal, PayloadMessage
from .pipeline import PipelineBuilder
from .filters import ForEach

logger = get_logger(__name__)


class RequirePayload:
    """Stops the run when the payload is empty."""

    async def execute(self, message: PayloadMessage, signal: ExecutionSignal) -> None:
        if not message.payload:
            signal.stop("Empty payload")


class EchoPayload:
    """Copies the incoming payload under the `echo` key."""

    async def execute(self, message: PayloadMessage, signal: ExecutionSignal) -> None:
        message.payload["echo"] = {
            key: value for key, value in message.payload.items() if key != "echo"
        }
        signal.annotate("keys", len(message.payload["echo"]))


class CountWord:
    async def execute(self, message: PayloadMessage, signal: ExecutionSignal) -> None:
        word = message.payload["current_word"]
        counts: dict[str, Any] = message.payload.setdefault("word_counts", {})
        counts[word] = counts.get(word, 0) + 1


def _set_current_word(message: PayloadMessage, word: str) -> None:
    message.payload["current_word"] = word


def configure_echo(builder: PipelineBuilder) -> PipelineBuilder:
    return (
        builder.use(LoggingAspect(logger, mode=LogMode.START_END_ONLY))
        .use(ExceptionAspect())
        .add(RequirePayload(), EchoPayload())
        .add(
            ForEach(
                lambda msg: msg.payload.get("words"),
                _set_current_word,
                CountWord(),
            )
        )
    )


def register_sample_pipelines(application: Application) -> None:
    """Register the demo pipelines served by main.py."""
    application.register_pipeline("echo", configure_echo)
