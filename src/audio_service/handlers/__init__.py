"""Handlers orchestrating storage, extraction and domain logic."""

from .cache_check_handler import CacheCheckHandler
from .cleanup_handler import CleanupHandler
from .cookie_status_handler import CookieStatusHandler
from .delivery_handler import DeliveryHandler
from .extraction_orchestrator import ExtractionOrchestrator
from .prefetch_handler import PrefetchHandler

__all__ = [
    "CacheCheckHandler",
    "CleanupHandler",
    "CookieStatusHandler",
    "DeliveryHandler",
    "ExtractionOrchestrator",
    "PrefetchHandler",
]
