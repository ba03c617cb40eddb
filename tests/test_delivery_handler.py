from __future__ import annotations

import pytest

from audio_service.exceptions import ExtractionExhausted, InvalidVideoId
from audio_service.handlers import DeliveryHandler
from conftest import InMemoryArtifactStore
from mytube_common import StorageConfig, StorageUnavailable

VIDEO_ID = "dQw4w9WgXcQ"
STORAGE_CONFIG = StorageConfig(endpoint="localhost:9000", access_key="", secret_key="")


class SpyOrchestrator:
    def __init__(self, storage: InMemoryArtifactStore, error: Exception | None = None):
        self.storage = storage
        self.error = error
        self.calls: list[str] = []

    def extract(self, video_id: str):
        self.calls.append(video_id)
        if self.error is not None:
            raise self.error
        self.storage.add(f"{video_id}_v2.m4a", b"audio", "audio/mp4")


def test_cache_hit_skips_extraction(storage: InMemoryArtifactStore) -> None:
    storage.add(f"{VIDEO_ID}_v2.m4a", b"audio", "audio/mp4")
    orchestrator = SpyOrchestrator(storage)

    target = DeliveryHandler(storage, orchestrator, STORAGE_CONFIG).resolve(VIDEO_ID)

    assert target.url == f"https://r2.mytube.app/{VIDEO_ID}_v2.m4a"
    assert orchestrator.calls == []


def test_cache_miss_extracts_and_returns_same_url(storage: InMemoryArtifactStore) -> None:
    orchestrator = SpyOrchestrator(storage)

    target = DeliveryHandler(storage, orchestrator, STORAGE_CONFIG).resolve(VIDEO_ID)

    assert target.url == f"https://r2.mytube.app/{VIDEO_ID}_v2.m4a"
    assert orchestrator.calls == [VIDEO_ID]


def test_zero_length_artifact_is_extracted_again(storage: InMemoryArtifactStore) -> None:
    storage.add(f"{VIDEO_ID}_v2.m4a", b"", "audio/mp4")
    orchestrator = SpyOrchestrator(storage)

    DeliveryHandler(storage, orchestrator, STORAGE_CONFIG).resolve(VIDEO_ID)

    assert orchestrator.calls == [VIDEO_ID]


@pytest.mark.parametrize("video_id", [None, "", "short", "dQw4w9WgXcQ/../x", "dQw4w9WgXc!"])
def test_invalid_ids_are_rejected_before_storage(
    storage: InMemoryArtifactStore, video_id
) -> None:
    orchestrator = SpyOrchestrator(storage)

    with pytest.raises(InvalidVideoId):
        DeliveryHandler(storage, orchestrator, STORAGE_CONFIG).resolve(video_id)

    assert storage.calls == []
    assert orchestrator.calls == []


def test_exhaustion_propagates(storage: InMemoryArtifactStore) -> None:
    orchestrator = SpyOrchestrator(storage, ExtractionExhausted(VIDEO_ID, 6, "boom"))

    with pytest.raises(ExtractionExhausted):
        DeliveryHandler(storage, orchestrator, STORAGE_CONFIG).resolve(VIDEO_ID)


def test_storage_outage_propagates(storage: InMemoryArtifactStore) -> None:
    storage.failing.add(f"{VIDEO_ID}_v2.m4a")
    orchestrator = SpyOrchestrator(storage)

    with pytest.raises(StorageUnavailable):
        DeliveryHandler(storage, orchestrator, STORAGE_CONFIG).resolve(VIDEO_ID)

    assert orchestrator.calls == []
