import logging

import pytest

from app.logging_config import AssetContextFilter, StructuredFormatter, asset_context, setup_logging
from app.services.pipeline import PipelineOrchestrator


def make_record(name: str = "app.services.pipeline.orchestrator") -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "Remuxed: %s", ("out.mp4",), None)


@pytest.mark.unit
def test_record_outside_a_run_has_no_asset_prefix() -> None:
    record = make_record()
    AssetContextFilter().filter(record)

    line = StructuredFormatter().format(record)

    assert record.asset_id is None
    assert line.endswith("| pipeline.orchestrator | Remuxed: out.mp4")


@pytest.mark.unit
def test_record_inside_a_run_carries_asset_id() -> None:
    record = make_record()
    token = asset_context.set("abc123")
    try:
        AssetContextFilter().filter(record)
    finally:
        asset_context.reset(token)

    line = StructuredFormatter().format(record)

    assert "| [abc123] Remuxed: out.mp4" in line


@pytest.mark.unit
def test_setup_logging_installs_asset_filter(settings) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(settings)

        handler = root.handlers[0]
        assert isinstance(handler.formatter, StructuredFormatter)
        assert any(isinstance(f, AssetContextFilter) for f in handler.filters)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.unit
async def test_pipeline_binds_asset_id_for_the_run(settings, runner, storage, asset, payload) -> None:
    seen = []

    async def callback(status, progress, message):
        seen.append(asset_context.get())

    await PipelineOrchestrator(settings, runner=runner, storage=storage).process(
        asset, payload, callback
    )

    assert seen and set(seen) == {"abc123"}
    assert asset_context.get() is None
