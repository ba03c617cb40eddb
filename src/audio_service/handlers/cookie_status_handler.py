"""Reports the health of the stored cookie export."""

import logging

from mytube_common import StorageUnavailable
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain import CookieHealth, evaluate_cookie_health
from audio_service.infrastructure import CredentialProvider

logger = logging.getLogger(__name__)


class CookieStatusHandler:
    """Combines the cookie export and its upload time into a health report."""

    def __init__(self, storage: ArtifactStore, credentials: CredentialProvider):
        self._storage = storage
        self._credentials = credentials

    def status(self) -> CookieHealth | None:
        """
        Evaluates the stored credentials.

        Returns:
            The health report, or None when no export exists.

        Raises:
            CredentialFormatError: If the export is malformed.
            StorageUnavailable: If the export cannot be read.
        """
        credentials = self._credentials.load()
        if credentials is None:
            return None

        try:
            last_uploaded = self._storage.exists(self._credentials.key).last_modified
        except StorageUnavailable:
            logger.warning("Could not stat cookie export", exc_info=True)
            last_uploaded = None

        health = evaluate_cookie_health(credentials, last_uploaded=last_uploaded)
        logger.info(
            "Cookie status evaluated",
            extra={"status": health.status.value, "valid": health.valid_cookies},
        )
        return health
