"""Pipeline orchestration engine.

Entry point for a complete cleanup run, with its configuration and result
types.
"""

from subdedupe.engine.config import PipelineConfig, PipelineResult
from subdedupe.engine.runner import run_pipeline

__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "run_pipeline",
]
