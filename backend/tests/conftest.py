from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.config import Settings
from app.models.schemas import MediaAsset
from app.services.process_runner import ProcessResult
from app.services.storage import StorageError


def probe_json(width: int, height: int) -> str:
    return json.dumps({"programs": [], "streams": [{"width": width, "height": height}]})


class FakeProcessRunner:
    """Stands in for ffprobe/ffmpeg; ffmpeg writes its output file like the real tool."""

    def __init__(
        self,
        *,
        probe_output: str | None = None,
        probe_code: int = 0,
        probe_stderr: str = "",
        remux_code: int = 0,
        remux_stderr: str = "",
        write_partial_output: bool = False,
    ):
        self.probe_output = probe_output if probe_output is not None else probe_json(1920, 1080)
        self.probe_code = probe_code
        self.probe_stderr = probe_stderr
        self.remux_code = remux_code
        self.remux_stderr = remux_stderr
        self.write_partial_output = write_partial_output
        self.calls: list[list[str]] = []

    @property
    def programs(self) -> list[str]:
        return [Path(call[0]).name for call in self.calls]

    async def run(self, args: list[str]) -> ProcessResult:
        self.calls.append(list(args))
        program = Path(args[0]).name

        if program == "ffprobe":
            return ProcessResult(
                args=list(args),
                returncode=self.probe_code,
                stdout=self.probe_output if self.probe_code == 0 else "",
                stderr=self.probe_stderr,
            )

        if program == "ffmpeg":
            output = Path(args[-1])
            if self.remux_code == 0:
                output.write_bytes(Path(args[2]).read_bytes())
            elif self.write_partial_output:
                output.write_bytes(b"partial")
            return ProcessResult(
                args=list(args),
                returncode=self.remux_code,
                stderr=self.remux_stderr,
            )

        raise FileNotFoundError(args[0])


class FakeStorage:
    """Records uploads; optionally fails every put."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.on_put = None
        self.puts: list[dict] = []

    async def put(self, key: str, path: Path, content_type: str) -> None:
        self.puts.append(
            {
                "key": key,
                "path": path,
                "content_type": content_type,
                "data": path.read_bytes() if path.exists() else None,
            }
        )
        if self.on_put is not None:
            self.on_put()
        if self.error is not None:
            raise self.error


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        temp_dir=tmp_path / "staging",
        s3_bucket="test-bucket",
        s3_region="eu-west-1",
    )


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def failing_storage() -> FakeStorage:
    return FakeStorage(error=StorageError("bucket unavailable", key="x"))


@pytest.fixture
def asset() -> MediaAsset:
    return MediaAsset(asset_id="abc123", size_bytes=11, content_type="video/mp4")


@pytest.fixture
def payload() -> bytes:
    return b"fake-mp4-01"
