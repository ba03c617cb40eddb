from .audio import router as audio_router
from .cache import router as cache_router
from .cookies import router as cookies_router
from .logs import router as logs_router

__all__ = [
    "audio_router",
    "cache_router",
    "cookies_router",
    "logs_router",
]
