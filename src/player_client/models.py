"""Models shared by the relay and its callers."""

import re
from enum import Enum

from mytube_common import ClientIdentity
from pydantic import BaseModel, Field

_RANGE_PATTERN = re.compile(r"^bytes=(\d+)-(\d*)$")
_CONTENT_RANGE_PATTERN = re.compile(r"^bytes (\d+)-(\d+)/(\d+|\*)$")


class RelayState(str, Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    LISTENING = "listening"


class ProxySession(BaseModel, frozen=True):
    """The remote origin a relay connection forwards to."""

    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    identity: ClientIdentity = ClientIdentity.ANDROID
    container: str = "mp4"


class ByteRange(BaseModel, frozen=True):
    """A single ``bytes=start-[end]`` range, end inclusive."""

    start: int
    end: int | None = None

    @classmethod
    def parse(cls, header: str | None) -> "ByteRange | None":
        """
        Parses a Range request header.

        Only ``bytes=start-`` and ``bytes=start-end`` are understood; any
        other form yields None and is not forwarded.
        """
        if not header:
            return None
        match = _RANGE_PATTERN.match(header.strip())
        if not match:
            return None
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else None
        if end is not None and end < start:
            return None
        return cls(start=start, end=end)

    @classmethod
    def from_content_range(cls, header: str | None) -> "ByteRange | None":
        """Parses the ``bytes start-end/total`` form of a Content-Range."""
        if not header:
            return None
        match = _CONTENT_RANGE_PATTERN.match(header.strip())
        if not match:
            return None
        return cls(start=int(match.group(1)), end=int(match.group(2)))

    @property
    def length(self) -> int | None:
        if self.end is None:
            return None
        return self.end - self.start + 1

    @property
    def header_value(self) -> str:
        end = "" if self.end is None else str(self.end)
        return f"bytes={self.start}-{end}"
