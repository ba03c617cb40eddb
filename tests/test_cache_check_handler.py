from __future__ import annotations

from audio_service.handlers import CacheCheckHandler
from conftest import InMemoryArtifactStore

CACHED = "aaaaaaaaaaa"
EMPTY = "bbbbbbbbbbb"
UNKNOWN = "ccccccccccc"
BROKEN = "ddddddddddd"


def test_ids_are_split_in_request_order(storage: InMemoryArtifactStore) -> None:
    storage.add(f"{CACHED}_v2.m4a", b"audio")
    storage.add(f"{EMPTY}_v2.m4a", b"")
    storage.failing.add(f"{BROKEN}_v2.m4a")

    found, missing = CacheCheckHandler(storage).check(
        [UNKNOWN, CACHED, EMPTY, BROKEN, "not-an-id", CACHED]
    )

    assert found == [CACHED]
    assert missing == [UNKNOWN, EMPTY, BROKEN, "not-an-id"]


def test_at_most_fifty_ids_are_checked(storage: InMemoryArtifactStore) -> None:
    ids = [f"video{i:06d}" for i in range(80)]

    found, missing = CacheCheckHandler(storage).check(ids)

    assert found == []
    assert missing == ids[:50]
    assert len(storage.calls) == 50


def test_empty_request_checks_nothing(storage: InMemoryArtifactStore) -> None:
    assert CacheCheckHandler(storage).check(["", ""]) == ([], [])
    assert storage.calls == []
