import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_orchestrator, get_repository, get_thumbnail_store
from app.config import get_settings
from app.main import app
from app.services.pipeline import PipelineOrchestrator
from app.services.thumbnail_store import ThumbnailStore
from app.services.video_repository import InMemoryVideoRepository

from conftest import FakeProcessRunner, FakeStorage, probe_json


@pytest.fixture
def repository() -> InMemoryVideoRepository:
    return InMemoryVideoRepository()


@pytest.fixture
def thumbnail_store() -> ThumbnailStore:
    return ThumbnailStore(max_entries=4)


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    return FakeProcessRunner(probe_output=probe_json(1080, 1920))


@pytest.fixture
def client(settings, repository, thumbnail_store, fake_runner, storage):
    orchestrator = PipelineOrchestrator(settings, runner=fake_runner, storage=storage)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_thumbnail_store] = lambda: thumbnail_store
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    yield TestClient(app)

    app.dependency_overrides.clear()


def create_video(client: TestClient) -> str:
    response = client.post("/api/videos", json={"title": "Demo", "user_id": "u1"})
    assert response.status_code == 201
    return response.json()["video_id"]


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_create_and_read_video(client) -> None:
    video_id = create_video(client)

    response = client.get(f"/api/videos/{video_id}")

    assert response.status_code == 200
    assert response.json()["title"] == "Demo"
    assert [v["video_id"] for v in client.get("/api/videos").json()] == [video_id]


def test_create_requires_title(client) -> None:
    assert client.post("/api/videos", json={"title": ""}).status_code == 422


def test_get_unknown_video(client) -> None:
    response = client.get("/api/videos/missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "Couldn't find video"


def test_upload_publishes_and_sets_video_url(client, storage, settings) -> None:
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/upload",
        files={"video": ("clip.mp4", b"fake-mp4-data", "video/mp4")},
    )

    assert response.status_code == 200
    expected_url = f"https://test-bucket.s3.eu-west-1.amazonaws.com/portrait/{video_id}.mp4"
    assert response.json()["video_url"] == expected_url
    assert client.get(f"/api/videos/{video_id}").json()["video_url"] == expected_url
    assert storage.puts[0]["key"] == f"portrait/{video_id}.mp4"
    assert storage.puts[0]["data"] == b"fake-mp4-data"
    assert list(settings.temp_dir.iterdir()) == []


def test_upload_to_unknown_video(client) -> None:
    response = client.post(
        "/api/videos/missing/upload",
        files={"video": ("clip.mp4", b"data", "video/mp4")},
    )

    assert response.status_code == 404


def test_upload_without_file(client) -> None:
    video_id = create_video(client)

    response = client.post(f"/api/videos/{video_id}/upload")

    assert response.status_code == 400
    assert response.json()["detail"] == "No video file provided"


def test_upload_too_large(client, settings, storage) -> None:
    settings.max_video_upload_bytes = 4
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/upload",
        files={"video": ("clip.mp4", b"more-than-four", "video/mp4")},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Video file is too large"
    assert storage.puts == []


def test_upload_wrong_type(client) -> None:
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/upload",
        files={"video": ("clip.mov", b"data", "video/quicktime")},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported file type for video"


def test_upload_keeps_fields_set_while_publishing(client, storage, repository) -> None:
    video_id = create_video(client)
    storage.on_put = lambda: repository.update(
        video_id, thumbnail_url=f"/api/thumbnails/{video_id}"
    )

    response = client.post(
        f"/api/videos/{video_id}/upload",
        files={"video": ("clip.mp4", b"fake-mp4-data", "video/mp4")},
    )

    assert response.status_code == 200
    record = client.get(f"/api/videos/{video_id}").json()
    assert record["video_url"].endswith(f"/portrait/{video_id}.mp4")
    assert record["thumbnail_url"] == f"/api/thumbnails/{video_id}"
    assert response.json()["thumbnail_url"] == f"/api/thumbnails/{video_id}"


def test_pipeline_failure_is_server_error(client, fake_runner, repository) -> None:
    fake_runner.probe_code = 1
    fake_runner.probe_stderr = "Invalid data found when processing input"
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/upload",
        files={"video": ("clip.mp4", b"not-a-video", "video/mp4")},
    )

    assert response.status_code == 500
    assert response.json()["detail"].startswith("[probe]")
    assert repository.get(video_id).video_url is None


def test_thumbnail_upload_and_fetch(client) -> None:
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/thumbnail",
        files={"thumbnail": ("thumb.png", b"\x89PNG-bytes", "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["thumbnail_url"] == f"/api/thumbnails/{video_id}"

    image = client.get(f"/api/thumbnails/{video_id}")
    assert image.status_code == 200
    assert image.content == b"\x89PNG-bytes"
    assert image.headers["content-type"] == "image/png"


def test_thumbnail_rejects_non_image(client) -> None:
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/thumbnail",
        files={"thumbnail": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported file type for thumbnail"


def test_thumbnail_too_large(client, settings) -> None:
    settings.max_thumbnail_upload_bytes = 2
    video_id = create_video(client)

    response = client.post(
        f"/api/videos/{video_id}/thumbnail",
        files={"thumbnail": ("thumb.png", b"large", "image/png")},
    )

    assert response.status_code == 400


def test_missing_thumbnail(client) -> None:
    response = client.get("/api/thumbnails/missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "Thumbnail not found"
