"""Application configuration loaded from environment variables."""

import os
import tempfile
from pathlib import Path

from mytube_common import StorageConfig
from pydantic import BaseModel


class ExtractionConfig(BaseModel, frozen=True):
    """yt-dlp invocation configuration."""

    binary: str = "yt-dlp"
    proxy_url: str | None = None
    timeout_seconds: int = 240
    max_attempts: int = 6
    scratch_dir: Path = Path(tempfile.gettempdir())


class SchedulerConfig(BaseModel, frozen=True):
    """Periodic job configuration."""

    enabled: bool = False
    prefetch_interval_hours: int = 6
    prefetch_recent_entries: int = 3
    cleanup_max_age_days: int = 2
    cleanup_hour_utc: int = 0


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    storage: StorageConfig
    extraction: ExtractionConfig
    scheduler: SchedulerConfig
    api_secret: str = ""


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        storage=StorageConfig(
            endpoint=os.getenv("S3_ENDPOINT", "localhost:9000"),
            access_key=os.getenv("S3_ACCESS_KEY", ""),
            secret_key=os.getenv("S3_SECRET_KEY", ""),
            bucket_name=os.getenv("S3_BUCKET", "mytube-audio"),
            region=os.getenv("S3_REGION", "auto"),
            secure=_env_flag("S3_SECURE", "true"),
            public_domain=os.getenv("S3_PUBLIC_DOMAIN", "https://r2.mytube.app"),
        ),
        extraction=ExtractionConfig(
            binary=os.getenv("YTDLP_BINARY", "yt-dlp"),
            proxy_url=os.getenv("YTDLP_PROXY") or None,
            timeout_seconds=int(os.getenv("YTDLP_TIMEOUT_SECONDS", "240")),
            max_attempts=int(os.getenv("EXTRACTION_MAX_ATTEMPTS", "6")),
            scratch_dir=Path(os.getenv("SCRATCH_DIR", tempfile.gettempdir())),
        ),
        scheduler=SchedulerConfig(
            enabled=_env_flag("SCHEDULER_ENABLED", "false"),
            prefetch_interval_hours=int(os.getenv("PREFETCH_INTERVAL_HOURS", "6")),
            prefetch_recent_entries=int(os.getenv("PREFETCH_RECENT_ENTRIES", "3")),
            cleanup_max_age_days=int(os.getenv("CLEANUP_MAX_AGE_DAYS", "2")),
            cleanup_hour_utc=int(os.getenv("CLEANUP_HOUR_UTC", "0")),
        ),
        api_secret=os.getenv("API_SECRET", ""),
    )
