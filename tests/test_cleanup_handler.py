from __future__ import annotations

from datetime import datetime, timedelta, timezone

from audio_service.handlers import CleanupHandler
from conftest import InMemoryArtifactStore

NOW = datetime(2024, 6, 10, 0, 0, tzinfo=timezone.utc)
OLD = NOW - timedelta(days=3)
RECENT = NOW - timedelta(hours=12)


def test_only_stale_artifacts_are_deleted(storage: InMemoryArtifactStore) -> None:
    storage.add("aaaaaaaaaaa_v2.m4a", b"a", last_modified=OLD)
    storage.add("aaaaaaaaaaa.json", b"{}", last_modified=OLD)
    storage.add("bbbbbbbbbbb_v2.m4a", b"b", last_modified=RECENT)
    storage.add("system/_cookies.json", b"[]", last_modified=OLD)
    storage.add("logs/2024-06-01/prefetch_1_abcdef12.json", b"{}", last_modified=OLD)

    deleted = CleanupHandler(storage, max_age_days=2).run(now=NOW)

    assert deleted == 2
    assert sorted(storage.objects) == [
        "bbbbbbbbbbb_v2.m4a",
        "logs/2024-06-01/prefetch_1_abcdef12.json",
        "system/_cookies.json",
    ]


def test_deletes_are_paged(storage: InMemoryArtifactStore) -> None:
    for i in range(2500):
        storage.add(f"video{i:06d}_v2.m4a", b"x", last_modified=OLD)

    deleted = CleanupHandler(storage).run(now=NOW)

    assert deleted == 2500
    assert [len(batch) for batch in storage.deleted_batches] == [1000, 1000, 500]
    assert storage.objects == {}


def test_nothing_stale_sends_no_delete(storage: InMemoryArtifactStore) -> None:
    storage.add("bbbbbbbbbbb_v2.m4a", b"b", last_modified=RECENT)

    assert CleanupHandler(storage).run(now=NOW) == 0
    assert storage.deleted_batches == []
