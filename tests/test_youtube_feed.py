from __future__ import annotations

import httpx
import pytest

from audio_service.exceptions import FeedUnavailable
from audio_service.infrastructure import YouTubeFeedSource
from audio_service.infrastructure.youtube_feed import parse_feed

FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015"
      xmlns="http://www.w3.org/2005/Atom">
  <title>Channel</title>
  <entry>
    <id>yt:video:aaaaaaaaaaa</id>
    <yt:videoId>aaaaaaaaaaa</yt:videoId>
  </entry>
  <entry>
    <id>yt:video:bbbbbbbbbbb</id>
  </entry>
  <entry>
    <id>yt:video:ccccccccccc</id>
    <yt:videoId>ccccccccccc</yt:videoId>
  </entry>
</feed>
"""


def test_parse_feed_reads_entries_in_order() -> None:
    assert parse_feed(FEED) == ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"]


def test_source_requests_channel_feed_and_limits_entries() -> None:
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url)
        return httpx.Response(200, text=FEED)

    client = httpx.Client(transport=httpx.MockTransport(handler))

    video_ids = YouTubeFeedSource(client).recent_video_ids("UC123", 2)

    assert video_ids == ["aaaaaaaaaaa", "bbbbbbbbbbb"]
    assert requested[0].params["channel_id"] == "UC123"
    assert requested[0].path == "/feeds/videos.xml"


@pytest.mark.parametrize(
    "response",
    [httpx.Response(404, text="not found"), httpx.Response(200, text="<feed")],
)
def test_bad_feed_is_unavailable(response: httpx.Response) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: response))

    with pytest.raises(FeedUnavailable):
        YouTubeFeedSource(client).recent_video_ids("UC123", 3)
