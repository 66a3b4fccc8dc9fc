"""Aspects wrapping the filter loop."""

from .exception import ExceptionAspect
from .logging import LoggingAspect, LogMode
from .retry import RetryAspect

__all__ = [
    "ExceptionAspect",
    "LoggingAspect",
    "LogMode",
    "RetryAspect",
]
