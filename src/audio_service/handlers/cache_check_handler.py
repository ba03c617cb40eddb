"""Batch existence check of cached artifacts."""

import logging
from concurrent.futures import ThreadPoolExecutor

from mytube_common import StorageUnavailable
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain import artifact_key, validate_video_id
from audio_service.exceptions import InvalidVideoId

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 50


class CacheCheckHandler:
    """Splits a list of video ids into cached and missing ones."""

    def __init__(self, storage: ArtifactStore, max_workers: int = 10):
        self._storage = storage
        self._max_workers = max_workers

    def check(self, video_ids: list[str]) -> tuple[list[str], list[str]]:
        """
        Checks which videos already have a usable artifact.

        The list is de-duplicated and truncated to the first 50 ids. A
        storage error for one id reports it as missing.

        Returns:
            Tuple of (found, missing), each in request order.
        """
        ids = [video_id for video_id in dict.fromkeys(video_ids) if video_id][
            :MAX_BATCH_SIZE
        ]
        if not ids:
            return [], []

        with ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(ids)),
            thread_name_prefix="cache-check",
        ) as pool:
            results = list(pool.map(self._is_cached, ids))

        found = [video_id for video_id, cached in zip(ids, results) if cached]
        missing = [video_id for video_id, cached in zip(ids, results) if not cached]
        logger.info(
            "Cache check completed",
            extra={"requested": len(ids), "found": len(found)},
        )
        return found, missing

    def _is_cached(self, video_id: str) -> bool:
        try:
            key = artifact_key(validate_video_id(video_id))
        except InvalidVideoId:
            return False
        try:
            return self._storage.exists(key).is_usable
        except StorageUnavailable:
            return False
