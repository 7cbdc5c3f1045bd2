"""Pipeline progress tracking with callback-based listener notification.

Tracks the current stage and progress percentage for each pipeline run and
broadcasts updates to registered listener callbacks.  Listeners are keyed
by run ID so several runs (e.g. a test suite) can share a tracker without
cross-talk.

# ─── HOW PROGRESS TRACKING WORKS ──────────────────────────────────────
#
# This implements the Observer pattern:
#
#   Orchestrator ──update()──→ ProgressTracker ──callback()──→ CLI printer
#                                               ──→ (any other listener)
#
#   1. The orchestrator calls tracker.update(run_id, stage, progress, msg)
#   2. ProgressTracker stores the snapshot and calls all registered listeners
#   3. A listener that raises is logged and skipped; the run goes on
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from showlist.models.pipeline import PipelineStage
from showlist.utils.logging import get_logger

ProgressListener = Callable[[str, PipelineStage, float, str], object]


@dataclass
class _RunStatus:
    """Internal snapshot of a single run's progress."""

    stage: PipelineStage = PipelineStage.READ
    progress: float = 0.0
    message: str = ""


class ProgressTracker:
    """Tracks and broadcasts pipeline progress via callbacks."""

    def __init__(self) -> None:
        self._statuses: dict[str, _RunStatus] = {}
        self._listeners: dict[str, list[ProgressListener]] = {}
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def update(
        self,
        run_id: str,
        stage: PipelineStage,
        progress: float,
        message: str,
    ) -> None:
        """Record a progress update and notify all registered listeners.

        Parameters
        ----------
        run_id:
            The pipeline run to update.
        stage:
            The current pipeline stage.
        progress:
            Completion percentage, clamped to 0.0 - 100.0.
        message:
            Human-readable status message.
        """
        progress = max(0.0, min(100.0, progress))
        self._statuses[run_id] = _RunStatus(stage=stage, progress=progress, message=message)

        self._logger.debug(
            "progress_update",
            run_id=run_id,
            stage=stage.value,
            progress=round(progress, 1),
            message=message,
        )

        for callback in list(self._listeners.get(run_id, [])):
            try:
                callback(run_id, stage, progress, message)
            except Exception as exc:
                self._logger.warning(
                    "listener_callback_error",
                    run_id=run_id,
                    error=str(exc),
                    callback=getattr(callback, "__name__", repr(callback)),
                )

    def register_listener(self, run_id: str, callback: ProgressListener) -> None:
        """Register a callback ``(run_id, stage, progress, message)`` for a run."""
        listeners = self._listeners.setdefault(run_id, [])
        if callback not in listeners:
            listeners.append(callback)
            self._logger.debug(
                "listener_registered",
                run_id=run_id,
                total_listeners=len(listeners),
            )

    def unregister_listener(self, run_id: str, callback: ProgressListener) -> None:
        listeners = self._listeners.get(run_id, [])
        if callback in listeners:
            listeners.remove(callback)

    def get_status(self, run_id: str) -> dict:
        """Return the current stage and progress for a run.

        Returns
        -------
        dict
            Keys: ``stage`` (:class:`str`), ``progress`` (:class:`float`),
            ``message`` (:class:`str`).  Zeroed defaults for unknown runs.
        """
        status = self._statuses.get(run_id) or _RunStatus()
        return {
            "stage": status.stage.value,
            "progress": status.progress,
            "message": status.message,
        }
