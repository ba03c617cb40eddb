"""Evicts stale artifacts from the object store."""

import logging
from datetime import datetime, timedelta, timezone

from mytube_common.infrastructure import ArtifactStore

from audio_service.domain.models import LOGS_PREFIX, SYSTEM_PREFIX

logger = logging.getLogger(__name__)

DELETE_PAGE_SIZE = 1000
PRESERVED_PREFIXES = (SYSTEM_PREFIX, LOGS_PREFIX)


class CleanupHandler:
    """Deletes cached artifacts older than a maximum age."""

    def __init__(self, storage: ArtifactStore, max_age_days: int = 2):
        self._storage = storage
        self._max_age = timedelta(days=max_age_days)

    def run(self, now: datetime | None = None) -> int:
        """
        Deletes every stale object outside ``system/`` and ``logs/``.

        Returns:
            The number of deleted objects.

        Raises:
            StorageUnavailable: If listing or deleting fails.
        """
        now = now or datetime.now(timezone.utc)
        threshold = now - self._max_age
        logger.info("Starting cleanup", extra={"threshold": threshold.isoformat()})

        stale = [
            obj.key
            for obj in self._storage.list_prefix("")
            if not obj.key.startswith(PRESERVED_PREFIXES)
            and obj.last_modified is not None
            and obj.last_modified < threshold
        ]

        deleted = 0
        for start in range(0, len(stale), DELETE_PAGE_SIZE):
            deleted += self._storage.delete_batch(stale[start : start + DELETE_PAGE_SIZE])

        logger.info("Cleanup complete", extra={"deleted": deleted})
        return deleted
