"""Handler behind the "get playable URL for video X" contract."""

import logging

from mytube_common import StorageConfig
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain import RedirectTarget, artifact_key, validate_video_id

from .extraction_orchestrator import ExtractionOrchestrator

logger = logging.getLogger(__name__)


class DeliveryHandler:
    """Returns the public artifact URL, extracting the audio on a cache miss."""

    def __init__(
        self,
        storage: ArtifactStore,
        orchestrator: ExtractionOrchestrator,
        storage_config: StorageConfig,
    ):
        self._storage = storage
        self._orchestrator = orchestrator
        self._storage_config = storage_config

    def resolve(self, video_id: str | None) -> RedirectTarget:
        """
        Resolves a video to the URL of its cached audio.

        Args:
            video_id: The requested video identifier.

        Returns:
            RedirectTarget pointing at the public artifact URL.

        Raises:
            InvalidVideoId: If the identifier is missing or malformed.
            StorageUnavailable: If the cache check or upload failed.
            ExtractionExhausted: If the audio could not be extracted.
        """
        video_id = validate_video_id(video_id)
        key = artifact_key(video_id)
        target = RedirectTarget(url=self._storage_config.public_url(key))

        stat = self._storage.exists(key)
        if stat.is_usable:
            logger.info("Cache hit", extra={"video_id": video_id})
            return target

        if stat.present:
            logger.warning(
                "Cached artifact is empty, extracting again",
                extra={"video_id": video_id},
            )
        else:
            logger.info("Cache miss", extra={"video_id": video_id})

        self._orchestrator.extract(video_id)
        return target
