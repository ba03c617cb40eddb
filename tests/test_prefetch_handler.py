from __future__ import annotations

from audio_service.exceptions import ExtractionExhausted, FeedUnavailable
from audio_service.handlers import PrefetchHandler
from audio_service.infrastructure import StoredChannelPreferences
from audio_service.infrastructure.interfaces import FeedSource
from conftest import InMemoryArtifactStore


class FakeFeeds(FeedSource):
    def __init__(self, feeds: dict[str, list[str]], broken: set[str] = frozenset()):
        self.feeds = feeds
        self.broken = broken
        self.requests: list[tuple[str, int]] = []

    def recent_video_ids(self, channel_id: str, limit: int) -> list[str]:
        self.requests.append((channel_id, limit))
        if channel_id in self.broken:
            raise FeedUnavailable(channel_id)
        return self.feeds.get(channel_id, [])[:limit]


class FakeOrchestrator:
    def __init__(self, failing: set[str] = frozenset()):
        self.failing = failing
        self.calls: list[str] = []

    def extract(self, video_id: str):
        self.calls.append(video_id)
        if video_id in self.failing:
            raise ExtractionExhausted(video_id, 6, "ERROR: Sign in to confirm")


def _channels(storage: InMemoryArtifactStore, *channels: str) -> StoredChannelPreferences:
    storage.add(
        "system/home_channels.json",
        ("{\"channels\": [" + ", ".join(f'"{c}"' for c in channels) + "]}").encode(),
    )
    return StoredChannelPreferences(storage)


def test_missing_videos_are_extracted_and_cached_ones_skipped(
    storage: InMemoryArtifactStore,
) -> None:
    storage.add("aaaaaaaaaaa_v2.m4a", b"audio")
    feeds = FakeFeeds({"UC1": ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc", "ddddddddddd"]})
    orchestrator = FakeOrchestrator(failing={"ccccccccccc"})

    summary = PrefetchHandler(
        storage, orchestrator, _channels(storage, "UC1"), feeds, recent_entries=3
    ).run()

    assert feeds.requests == [("UC1", 3)]
    assert orchestrator.calls == ["bbbbbbbbbbb", "ccccccccccc"]
    assert summary.channels_scanned == 1
    assert summary.downloaded == 1
    assert summary.skipped == 1
    assert summary.failed == 1


def test_failing_channel_does_not_stop_the_scan(storage: InMemoryArtifactStore) -> None:
    feeds = FakeFeeds({"UC2": ["eeeeeeeeeee"]}, broken={"UC1"})
    orchestrator = FakeOrchestrator()

    summary = PrefetchHandler(
        storage, orchestrator, _channels(storage, "UC1", "UC2"), feeds
    ).run()

    assert orchestrator.calls == ["eeeeeeeeeee"]
    assert summary.channels_scanned == 2
    assert summary.channels_failed == 1
    assert summary.downloaded == 1


def test_no_preferences_means_no_work(storage: InMemoryArtifactStore) -> None:
    feeds = FakeFeeds({})

    summary = PrefetchHandler(
        storage, FakeOrchestrator(), StoredChannelPreferences(storage), feeds
    ).run()

    assert summary.channels_scanned == 0
    assert feeds.requests == []
