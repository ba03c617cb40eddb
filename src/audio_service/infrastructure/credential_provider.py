"""Loads the browser cookie export from the artifact store."""

import logging

from mytube_common import ObjectNotFound
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain import CredentialSet, parse_cookie_export
from audio_service.domain.models import COOKIES_KEY
from audio_service.exceptions import CredentialFormatError

logger = logging.getLogger(__name__)


class CredentialProvider:
    """Fetches a fresh credential set on every call."""

    def __init__(self, storage: ArtifactStore, key: str = COOKIES_KEY):
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> CredentialSet | None:
        """
        Reads and parses the cookie export.

        Returns:
            The credential set, or None when no export has been uploaded.

        Raises:
            CredentialFormatError: If the export is not valid cookie JSON.
            StorageUnavailable: If the store cannot be reached.
        """
        try:
            raw = self._storage.get(self._key)
        except ObjectNotFound:
            logger.info("No cookie export found", extra={"object_name": self._key})
            return None

        try:
            credentials = parse_cookie_export(raw)
        except ValueError as e:
            logger.exception(
                "Cookie export is malformed", extra={"object_name": self._key}
            )
            raise CredentialFormatError(self._key, e) from e

        logger.info("Cookie export loaded", extra={"cookie_count": len(credentials)})
        return credentials
