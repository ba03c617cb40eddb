"""Public YouTube channel feed implementation of the FeedSource interface."""

import logging
import xml.etree.ElementTree as ET

import httpx

from audio_service.exceptions import FeedUnavailable

from .interfaces import FeedSource

logger = logging.getLogger(__name__)

FEED_URL = "https://www.youtube.com/feeds/videos.xml"
_NAMESPACES = {
    "atom": "http://www.w3.org/2005/Atom",
    "yt": "http://www.youtube.com/xml/schemas/2015",
}


def parse_feed(document: bytes | str) -> list[str]:
    """Extracts video ids from an Atom channel feed, in document order."""
    root = ET.fromstring(document)
    video_ids = []
    for entry in root.findall("atom:entry", _NAMESPACES):
        video_id = entry.findtext("yt:videoId", default="", namespaces=_NAMESPACES)
        if not video_id:
            entry_id = entry.findtext("atom:id", default="", namespaces=_NAMESPACES)
            video_id = entry_id.removeprefix("yt:video:")
        if video_id:
            video_ids.append(video_id)
    return video_ids


class YouTubeFeedSource(FeedSource):
    """Fetches channel uploads from the public Atom feed."""

    def __init__(self, client: httpx.Client):
        self._client = client

    def recent_video_ids(self, channel_id: str, limit: int) -> list[str]:
        try:
            response = self._client.get(FEED_URL, params={"channel_id": channel_id})
            response.raise_for_status()
            video_ids = parse_feed(response.content)
        except (httpx.HTTPError, ET.ParseError) as e:
            logger.exception("Feed fetch failed", extra={"channel_id": channel_id})
            raise FeedUnavailable(channel_id, e) from e

        logger.info(
            "Feed fetched",
            extra={"channel_id": channel_id, "entries": len(video_ids)},
        )
        return video_ids[:limit]
