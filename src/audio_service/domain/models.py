"""Domain models for the audio service."""

import re
from datetime import datetime
from enum import Enum

from mytube_common import ClientIdentity
from pydantic import BaseModel, ConfigDict, Field

from audio_service.exceptions import InvalidVideoId

ARTIFACT_SCHEMA_SUFFIX = "_v2"
AUDIO_EXTENSION = "m4a"
AUDIO_CONTENT_TYPE = "audio/mp4"
METADATA_CONTENT_TYPE = "application/json"

SYSTEM_PREFIX = "system/"
LOGS_PREFIX = "logs/"
COOKIES_KEY = f"{SYSTEM_PREFIX}_cookies.json"
HOME_CHANNELS_KEY = f"{SYSTEM_PREFIX}home_channels.json"

_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")


def validate_video_id(video_id: str | None) -> str:
    """
    Ensures ``video_id`` is a well-formed YouTube video identifier.

    Raises:
        InvalidVideoId: If the value is missing or malformed.
    """
    if not video_id or not _VIDEO_ID_PATTERN.match(video_id):
        raise InvalidVideoId(video_id)
    return video_id


def artifact_key(video_id: str) -> str:
    """Object key of the cached audio for ``video_id``."""
    return f"{video_id}{ARTIFACT_SCHEMA_SUFFIX}.{AUDIO_EXTENSION}"


def metadata_key(video_id: str) -> str:
    """Object key of the sidecar metadata for ``video_id``."""
    return f"{video_id}.json"


class AudioArtifact(BaseModel, frozen=True):
    """A cached, ready-to-serve audio file."""

    video_id: str
    key: str
    byte_length: int
    content_type: str = AUDIO_CONTENT_TYPE
    uploaded_at: datetime
    metadata_stored: bool = False


class RedirectTarget(BaseModel, frozen=True):
    """Where a client should fetch the audio from."""

    url: str


class ExtractionStrategy(BaseModel, frozen=True):
    """One (credential use, client impersonation) pair of a plan."""

    use_credentials: bool
    client: ClientIdentity

    @property
    def label(self) -> str:
        prefix = "cookies" if self.use_credentials else "anonymous"
        return f"{prefix}+{self.client.value}"


class CookieRecord(BaseModel, frozen=True):
    """A single cookie from a browser export."""

    model_config = ConfigDict(populate_by_name=True)

    domain: str
    path: str = "/"
    secure: bool = False
    expiration: float | None = Field(default=None, alias="expirationDate")
    name: str
    value: str

    @property
    def is_session(self) -> bool:
        return not self.expiration

    def is_valid_at(self, now: float) -> bool:
        """Session cookies are always valid; others until they expire."""
        return self.is_session or self.expiration > now


class CredentialSet(BaseModel, frozen=True):
    """Ordered collection of cookies used to authenticate extraction."""

    cookies: tuple[CookieRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.cookies)


class VideoMetadata(BaseModel, frozen=True):
    """Trimmed sidecar metadata stored next to an artifact."""

    id: str
    title: str | None = None
    channel: str | None = None
    channel_id: str | None = None
    duration: float | None = None
    upload_date: str | None = None
    ext: str | None = None
    abr: float | None = None
    thumbnail: str | None = None
    strategy: str | None = None


class CookieHealthStatus(str, Enum):
    """Overall state of the stored credentials."""

    VALID = "Valid"
    EXPIRING_SOON = "Expiring Soon"
    EXPIRED = "Expired"
    MISSING = "Missing"


class CookieHealth(BaseModel, frozen=True):
    """Summary of the stored cookie export."""

    total_cookies: int
    valid_cookies: int
    earliest_expiration: float | None = None
    last_uploaded: datetime | None = None
    status: CookieHealthStatus


class PrefetchSummary(BaseModel, frozen=True):
    """Counters of one prefetch run."""

    channels_scanned: int = 0
    channels_failed: int = 0
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0


class RunLogEntry(BaseModel, frozen=True):
    timestamp: datetime
    level: str
    message: str


class RunLog(BaseModel, frozen=True):
    """Log records captured during one scheduled job run."""

    job_name: str
    start_time: datetime
    duration_ms: int
    logs: list[RunLogEntry]


class RunLogFile(BaseModel, frozen=True):
    """Listing entry of a stored run log."""

    filename: str
    key: str
    job_name: str
    timestamp: int
    size: int
