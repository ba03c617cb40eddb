"""Device-side helpers: cache status batching and the loopback audio relay."""

from player_client.cache_status import CacheStatusBatcher
from player_client.config import BatcherConfig, RelayConfig
from player_client.exceptions import BindFailed, RelayUpstreamError
from player_client.models import ByteRange, ProxySession, RelayState
from player_client.relay import LocalStreamingRelay

__all__ = [
    "BatcherConfig",
    "BindFailed",
    "ByteRange",
    "CacheStatusBatcher",
    "LocalStreamingRelay",
    "ProxySession",
    "RelayConfig",
    "RelayState",
    "RelayUpstreamError",
]
