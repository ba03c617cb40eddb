"""Read-only access to the home channel preferences kept in the artifact store."""

import json
import logging

from mytube_common import ObjectNotFound
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain.models import HOME_CHANNELS_KEY

from .interfaces import ChannelPreferenceStore

logger = logging.getLogger(__name__)


class StoredChannelPreferences(ChannelPreferenceStore):
    """Reads ``{"channels": [...]}`` written by the preference sync endpoint."""

    def __init__(self, storage: ArtifactStore, key: str = HOME_CHANNELS_KEY):
        self._storage = storage
        self._key = key

    def target_channels(self) -> list[str]:
        try:
            raw = self._storage.get(self._key)
        except ObjectNotFound:
            logger.info("No channel preferences found", extra={"object_name": self._key})
            return []

        try:
            channels = json.loads(raw).get("channels") or []
        except (ValueError, AttributeError):
            logger.exception(
                "Channel preferences are malformed", extra={"object_name": self._key}
            )
            return []

        return [str(channel) for channel in channels if channel]
