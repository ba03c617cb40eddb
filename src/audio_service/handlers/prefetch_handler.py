"""Warms the cache with the newest uploads of the home channels."""

import logging

from mytube_common import StorageUnavailable
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain import PrefetchSummary, artifact_key
from audio_service.exceptions import ExtractionExhausted, FeedUnavailable
from audio_service.infrastructure.interfaces import ChannelPreferenceStore, FeedSource

from .extraction_orchestrator import ExtractionOrchestrator

logger = logging.getLogger(__name__)


class PrefetchHandler:
    """Scans channel feeds and extracts every recent video not cached yet."""

    def __init__(
        self,
        storage: ArtifactStore,
        orchestrator: ExtractionOrchestrator,
        preferences: ChannelPreferenceStore,
        feeds: FeedSource,
        recent_entries: int = 3,
    ):
        self._storage = storage
        self._orchestrator = orchestrator
        self._preferences = preferences
        self._feeds = feeds
        self._recent_entries = recent_entries

    def run(self) -> PrefetchSummary:
        """
        Runs one prefetch pass.

        A failing channel is logged and skipped; the remaining channels are
        still scanned.

        Returns:
            Counters describing the pass.
        """
        logger.info("Starting scheduled prefetch")
        try:
            channels = self._preferences.target_channels()
        except StorageUnavailable:
            logger.exception("Could not read channel preferences")
            return PrefetchSummary()

        if not channels:
            logger.info("No home channels to scan")
            return PrefetchSummary()

        totals = {"downloaded": 0, "skipped": 0, "failed": 0}
        channels_failed = 0
        for channel_id in channels:
            logger.info("Scanning channel", extra={"channel_id": channel_id})
            try:
                counts = self._scan_channel(channel_id)
            except (FeedUnavailable, StorageUnavailable) as e:
                channels_failed += 1
                logger.error(
                    "Error processing channel",
                    extra={"channel_id": channel_id, "error": str(e)},
                )
                continue
            except Exception:
                channels_failed += 1
                logger.exception(
                    "Unexpected error processing channel",
                    extra={"channel_id": channel_id},
                )
                continue
            for name, value in counts.items():
                totals[name] += value

        summary = PrefetchSummary(
            channels_scanned=len(channels),
            channels_failed=channels_failed,
            **totals,
        )
        logger.info("Prefetch finished", extra=summary.model_dump())
        return summary

    def _scan_channel(self, channel_id: str) -> dict[str, int]:
        counts = {"downloaded": 0, "skipped": 0, "failed": 0}
        for video_id in self._feeds.recent_video_ids(channel_id, self._recent_entries):
            if self._storage.exists(artifact_key(video_id)).is_usable:
                logger.info(
                    "Video already cached, skipping", extra={"video_id": video_id}
                )
                counts["skipped"] += 1
                continue

            logger.info("Video missing, downloading", extra={"video_id": video_id})
            try:
                self._orchestrator.extract(video_id)
            except ExtractionExhausted as e:
                counts["failed"] += 1
                logger.error(
                    "Prefetch extraction failed",
                    extra={"video_id": video_id, "error": e.diagnostics},
                )
                continue
            counts["downloaded"] += 1
        return counts
