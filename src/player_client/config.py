"""Device-side configuration loaded from environment variables."""

import os

from pydantic import BaseModel


class RelayConfig(BaseModel, frozen=True):
    """Loopback streaming relay configuration."""

    host: str = "127.0.0.1"
    port: int = 8765
    upstream_timeout_seconds: float = 300
    request_head_timeout_seconds: float = 10


class BatcherConfig(BaseModel, frozen=True):
    """Cache status batcher configuration."""

    base_url: str
    api_secret: str
    debounce_seconds: float = 0.5
    max_batch_size: int = 50
    timeout_seconds: float = 15


def load_relay_config() -> RelayConfig:
    """Loads relay configuration from environment variables."""
    return RelayConfig(
        host=os.getenv("RELAY_HOST", "127.0.0.1"),
        port=int(os.getenv("RELAY_PORT", "8765")),
        upstream_timeout_seconds=float(os.getenv("RELAY_UPSTREAM_TIMEOUT", "300")),
        request_head_timeout_seconds=float(os.getenv("RELAY_REQUEST_HEAD_TIMEOUT", "10")),
    )


def load_batcher_config() -> BatcherConfig:
    """Loads batcher configuration from environment variables."""
    return BatcherConfig(
        base_url=os.getenv("MYTUBE_API_URL", "http://localhost:8000"),
        api_secret=os.getenv("API_SECRET", ""),
        debounce_seconds=float(os.getenv("CACHE_CHECK_DEBOUNCE_SECONDS", "0.5")),
    )
