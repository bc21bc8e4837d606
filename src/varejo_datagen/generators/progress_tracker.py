"""
Stage progress tracking for the generation pipeline.

This module provides StageProgressTracker for managing stage states and
progress while the pipeline runs. It separates progress percentages (how far
the workers of the running stage are) from completion state, which only
changes when the stage barrier has been passed.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class StageProgressTracker:
    """
    Thread-safe tracker for pipeline stage states and progress.

    State Transitions:
        pending → complete (when mark_stage_complete() is called)

    Stages must complete in the order they were registered.

    Thread Safety:
        All public methods are thread-safe using an internal lock.

    Attributes:
        _states: Dictionary mapping stage names to their current state.
        _progress: Dictionary mapping stage names to progress (0.0-1.0).
        _lock: Threading lock for synchronizing access to internal state.
    """

    STATE_PENDING = "pending"
    STATE_COMPLETE = "complete"

    def __init__(self, stage_names: list[str]) -> None:
        """
        Initialize tracker with the ordered list of stages.

        Args:
            stage_names: Stage names in execution order. All start pending
                        with 0.0 progress.
        """
        self._lock = threading.Lock()
        self._order: list[str] = list(stage_names)
        self._states: dict[str, str] = {}
        self._progress: dict[str, float] = {}

        for stage_name in stage_names:
            self._states[stage_name] = self.STATE_PENDING
            self._progress[stage_name] = 0.0

        logger.debug(f"Initialized StageProgressTracker with {len(stage_names)} stages")

    def update_progress(self, stage_name: str, progress: float) -> None:
        """
        Update progress (0.0-1.0) for a stage. Does NOT change state.

        Raises:
            KeyError: If stage_name is not being tracked.
            ValueError: If progress is not between 0.0 and 1.0.
        """
        if not 0.0 <= progress <= 1.0:
            raise ValueError(f"Progress must be between 0.0 and 1.0, got {progress}")

        with self._lock:
            if stage_name not in self._progress:
                raise KeyError(f"Stage '{stage_name}' is not being tracked")
            self._progress[stage_name] = progress

    def mark_stage_complete(self, stage_name: str) -> None:
        """
        Transition a stage to complete.

        Raises:
            KeyError: If stage_name is not being tracked.
            RuntimeError: If an earlier stage is still pending.
        """
        with self._lock:
            if stage_name not in self._states:
                raise KeyError(f"Stage '{stage_name}' is not being tracked")

            position = self._order.index(stage_name)
            for earlier in self._order[:position]:
                if self._states[earlier] != self.STATE_COMPLETE:
                    raise RuntimeError(
                        f"Cannot complete '{stage_name}' before '{earlier}'"
                    )

            self._states[stage_name] = self.STATE_COMPLETE
            self._progress[stage_name] = 1.0

            logger.debug(
                f"Stage '{stage_name}' state transition: "
                f"{self.STATE_PENDING} → {self.STATE_COMPLETE}"
            )

    def get_state(self, stage_name: str) -> str:
        """Get the current state of a stage."""
        with self._lock:
            if stage_name not in self._states:
                raise KeyError(f"Stage '{stage_name}' is not being tracked")
            return self._states[stage_name]

    def get_progress(self, stage_name: str) -> float:
        """Get the current progress of a stage."""
        with self._lock:
            if stage_name not in self._progress:
                raise KeyError(f"Stage '{stage_name}' is not being tracked")
            return self._progress[stage_name]

    def is_complete(self) -> bool:
        """Whether every stage has completed."""
        with self._lock:
            return all(state == self.STATE_COMPLETE for state in self._states.values())
