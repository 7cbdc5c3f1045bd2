"""Pipeline orchestration and progress tracking."""

from showlist.pipeline.orchestrator import PipelineOrchestrator
from showlist.pipeline.progress_tracker import ProgressTracker

__all__ = ["PipelineOrchestrator", "ProgressTracker"]
