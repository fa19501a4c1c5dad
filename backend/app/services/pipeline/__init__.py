"""
Pipeline module for video ingest.

This package contains the pipeline coordination components:
- orchestrator: Stage sequencing and guaranteed cleanup
- progress_manager: State transition reporting

Example:
    from app.services.pipeline import PipelineOrchestrator

    orchestrator = PipelineOrchestrator(settings, storage=storage)
    result = await orchestrator.process(asset, payload)
"""

from .orchestrator import PipelineOrchestrator
from .progress_manager import ProgressCallback, ProgressManager

__all__ = [
    # Main orchestrator
    "PipelineOrchestrator",
    # Supporting classes
    "ProgressManager",
    "ProgressCallback",
]
