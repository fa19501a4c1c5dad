import pytest

from app.models.schemas import ProcessingStatus
from app.services.pipeline import ProgressManager


@pytest.mark.unit
def test_weights_sum_to_hundred() -> None:
    assert sum(ProgressManager.STAGE_WEIGHTS.values()) == 100


@pytest.mark.unit
@pytest.mark.parametrize(
    "status,expected",
    [
        (ProcessingStatus.RECEIVED, 0),
        (ProcessingStatus.STAGED, 15),
        (ProcessingStatus.REMUXED, 50),
        (ProcessingStatus.PUBLISHED, 95),
        (ProcessingStatus.CLEANED, 100),
    ],
)
def test_overall_progress(status: ProcessingStatus, expected: float) -> None:
    assert ProgressManager().calculate_overall_progress(status) == expected


@pytest.mark.unit
def test_failed_run_has_no_progress() -> None:
    assert ProgressManager().calculate_overall_progress(ProcessingStatus.FAILED) == 0


@pytest.mark.unit
async def test_update_progress_without_callback_is_noop() -> None:
    await ProgressManager().update_progress(None, ProcessingStatus.STAGED, "Staged")


@pytest.mark.unit
async def test_update_progress_computes_value_from_status() -> None:
    received = []

    async def callback(status, progress, message):
        received.append((status, progress, message))

    await ProgressManager().update_progress(callback, ProcessingStatus.REMUXED, "Remuxed")

    assert received == [(ProcessingStatus.REMUXED, 50, "Remuxed")]


@pytest.mark.unit
async def test_update_progress_uses_explicit_value() -> None:
    received = []

    async def callback(status, progress, message):
        received.append((status, progress, message))

    await ProgressManager().update_progress(callback, ProcessingStatus.FAILED, "boom", progress=0)

    assert received == [(ProcessingStatus.FAILED, 0, "boom")]
