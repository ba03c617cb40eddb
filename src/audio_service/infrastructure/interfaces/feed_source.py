"""Abstract interfaces for the prefetch collaborators."""

from abc import ABC, abstractmethod


class FeedSource(ABC):
    """Abstract base class for public channel feeds."""

    @abstractmethod
    def recent_video_ids(self, channel_id: str, limit: int) -> list[str]:
        """
        Returns the newest video ids of a channel, newest first.

        Raises:
            FeedUnavailable: If the feed cannot be fetched or parsed.
        """


class ChannelPreferenceStore(ABC):
    """Abstract base class for the channel preference collaborator."""

    @abstractmethod
    def target_channels(self) -> list[str]:
        """
        Returns the channel ids the prefetch job should scan.

        Raises:
            StorageUnavailable: If the preferences cannot be read.
        """
