"""Storage-level models shared across services."""

from datetime import datetime

from pydantic import BaseModel


class ObjectStat(BaseModel, frozen=True):
    """Result of an existence check against the object store."""

    present: bool
    byte_length: int = 0
    content_type: str | None = None
    last_modified: datetime | None = None

    @property
    def is_usable(self) -> bool:
        """A zero-length object is a failed upload, not a cache hit."""
        return self.present and self.byte_length > 0


class StoredObject(BaseModel, frozen=True):
    """A single entry of a prefix listing."""

    key: str
    byte_length: int
    last_modified: datetime | None = None
