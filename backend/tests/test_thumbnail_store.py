import pytest

from app.services.thumbnail_store import ThumbnailStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
def test_put_and_get() -> None:
    store = ThumbnailStore()

    store.put("v1", b"png-bytes", "image/png")
    thumb = store.get("v1")

    assert thumb is not None
    assert thumb.data == b"png-bytes"
    assert thumb.media_type == "image/png"
    assert "v1" in store


@pytest.mark.unit
def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    store = ThumbnailStore(ttl_seconds=60, clock=clock)
    store.put("v1", b"a", "image/png")

    clock.now += 59
    assert store.get("v1") is not None

    clock.now += 1
    assert store.get("v1") is None
    assert len(store) == 0


@pytest.mark.unit
def test_least_recently_used_is_evicted() -> None:
    store = ThumbnailStore(max_entries=2)
    store.put("v1", b"1", "image/png")
    store.put("v2", b"2", "image/png")

    store.get("v1")
    store.put("v3", b"3", "image/png")

    assert "v1" in store
    assert "v2" not in store
    assert "v3" in store


@pytest.mark.unit
def test_replacing_keeps_single_entry() -> None:
    store = ThumbnailStore(max_entries=2)
    store.put("v1", b"old", "image/png")
    store.put("v1", b"new", "image/jpeg")

    assert len(store) == 1
    assert store.get("v1").data == b"new"


@pytest.mark.unit
def test_delete() -> None:
    store = ThumbnailStore()
    store.put("v1", b"1", "image/png")

    assert store.delete("v1") is True
    assert store.delete("v1") is False


@pytest.mark.unit
def test_rejects_empty_capacity() -> None:
    with pytest.raises(ValueError):
        ThumbnailStore(max_entries=0)


@pytest.mark.unit
def test_from_settings(settings) -> None:
    settings.thumbnail_cache_max_entries = 7

    store = ThumbnailStore.from_settings(settings)

    assert store.max_entries == 7
    assert store.ttl_seconds == settings.thumbnail_cache_ttl_seconds


class RecordingLock:
    def __init__(self):
        self.acquired = 0

    def __enter__(self):
        self.acquired += 1
        return self

    def __exit__(self, *exc_info):
        return False


@pytest.mark.unit
def test_len_reads_under_lock() -> None:
    store = ThumbnailStore()
    store.put("v1", b"1", "image/png")
    lock = RecordingLock()
    store._lock = lock

    assert len(store) == 1
    assert lock.acquired == 1
