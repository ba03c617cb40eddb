"""Infrastructure implementations."""

from .channel_preferences import StoredChannelPreferences
from .credential_provider import CredentialProvider
from .minio_storage import MinioArtifactStore
from .run_log import RunLogReader, RunLogRecorder
from .youtube_feed import YouTubeFeedSource
from .ytdlp_tool import YtDlpTool

__all__ = [
    "CredentialProvider",
    "MinioArtifactStore",
    "RunLogReader",
    "RunLogRecorder",
    "StoredChannelPreferences",
    "YouTubeFeedSource",
    "YtDlpTool",
]
