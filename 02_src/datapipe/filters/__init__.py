"""Built-in filters and the shared filter runner."""

from .retry import OnTimeoutRetry, is_transient, retry_transient
from .runner import run_filter, run_filters
from .structural import (
    ForEach,
    IfTrue,
    LambdaFilter,
    Repeat,
    RepeatUntil,
    Sequence,
    StopPipeline,
    Switch,
)

__all__ = [
    "run_filter",
    "run_filters",
    "LambdaFilter",
    "Sequence",
    "ForEach",
    "IfTrue",
    "Switch",
    "Repeat",
    "RepeatUntil",
    "StopPipeline",
    "OnTimeoutRetry",
    "is_transient",
    "retry_transient",
]
