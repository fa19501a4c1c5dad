"""
Progress management for pipeline stages.

Calculates overall progress based on stage weights and reports state
transitions of a pipeline run.
"""

import logging
from typing import Awaitable, Callable

from app.models.schemas import ProcessingStatus

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Signature: (status, progress_percent, message) -> None
ProgressCallback = Callable[[ProcessingStatus, float, str], Awaitable[None]]


class ProgressManager:
    """
    Manages progress calculation and reporting for pipeline stages.

    Weights follow where a run spends its time: writing the upload and
    remuxing are disk-bound, the S3 upload dominates.

    Example:
        manager = ProgressManager()
        overall = manager.calculate_overall_progress(ProcessingStatus.REMUXED)
        # Returns 50.0 (15 + 5 + 30)
    """

    # Progress weight of each completed state (must sum to 100)
    STAGE_WEIGHTS = {
        ProcessingStatus.RECEIVED: 0,
        ProcessingStatus.STAGED: 15,
        ProcessingStatus.PROBED: 5,
        ProcessingStatus.CLASSIFIED: 0,
        ProcessingStatus.REMUXED: 30,
        ProcessingStatus.PUBLISHED: 45,
        ProcessingStatus.CLEANED: 5,
    }

    # Linear state order of a successful run
    STAGE_ORDER = [
        ProcessingStatus.RECEIVED,
        ProcessingStatus.STAGED,
        ProcessingStatus.PROBED,
        ProcessingStatus.CLASSIFIED,
        ProcessingStatus.REMUXED,
        ProcessingStatus.PUBLISHED,
        ProcessingStatus.CLEANED,
    ]

    def calculate_overall_progress(self, current_stage: ProcessingStatus) -> float:
        """
        Calculate overall progress percentage.

        Steps report only on completion, so the reached state counts in full.

        Args:
            current_stage: State the run has reached

        Returns:
            Overall progress (0-100)
        """
        if current_stage not in self.STAGE_ORDER:
            return 0.0

        progress = 0.0
        for stage in self.STAGE_ORDER:
            progress += self.STAGE_WEIGHTS.get(stage, 0)
            if stage == current_stage:
                break

        return min(progress, 100)

    async def update_progress(
        self,
        callback: ProgressCallback | None,
        status: ProcessingStatus,
        message: str,
        progress: float | None = None,
    ) -> None:
        """
        Report a state transition via callback.

        Args:
            callback: Progress callback (may be None)
            status: State the run has reached
            message: Human-readable status message
            progress: Explicit overall progress (computed from status if None)
        """
        if callback is None:
            return

        if progress is None:
            progress = self.calculate_overall_progress(status)

        try:
            await callback(status, progress, message)
        except Exception as e:
            # Never fail due to callback error
            logger.warning(f"Progress callback error: {e}")
