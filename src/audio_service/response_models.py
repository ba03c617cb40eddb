"""Request and response models for the audio service API."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from audio_service.domain import CookieHealth, RunLogFile


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheCheckRequest(BaseModel):
    """Body of a batch cache check."""

    ids: list[str] = Field(default_factory=list)


class CacheCheckResponse(BaseModel):
    """Partition of the requested ids into cached and missing ones."""

    found: list[str]
    missing: list[str]


class CookieStatusResponse(CamelModel):
    """Health report of the stored cookie export."""

    total_cookies: int
    valid_cookies: int
    earliest_expiration: float | None
    last_uploaded: datetime | None
    status: str

    @classmethod
    def from_health(cls, health: CookieHealth) -> "CookieStatusResponse":
        return cls(
            total_cookies=health.total_cookies,
            valid_cookies=health.valid_cookies,
            earliest_expiration=health.earliest_expiration,
            last_uploaded=health.last_uploaded,
            status=health.status.value,
        )


class LogDatesResponse(BaseModel):
    dates: list[str]


class LogFileResponse(CamelModel):
    filename: str
    key: str
    job_name: str = Field(
        serialization_alias="functionName",
        validation_alias=AliasChoices("functionName", "job_name"),
    )
    timestamp: int
    size: int

    @classmethod
    def from_file(cls, log_file: RunLogFile) -> "LogFileResponse":
        return cls(
            filename=log_file.filename,
            key=log_file.key,
            job_name=log_file.job_name,
            timestamp=log_file.timestamp,
            size=log_file.size,
        )


class LogFilesResponse(BaseModel):
    files: list[LogFileResponse]
