"""Pipeline construction and execution."""

from .executor import PipelineExecutor
from .pipeline import Pipeline, PipelineBuilder

__all__ = [
    "Pipeline",
    "PipelineBuilder",
    "PipelineExecutor",
]
