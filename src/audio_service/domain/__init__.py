"""Domain layer containing business logic and models."""

from .cookie_health import evaluate_cookie_health
from .credential_converter import (
    credential_file,
    from_native_format,
    parse_cookie_export,
    to_native_format,
)
from .models import (
    AudioArtifact,
    CookieHealth,
    CookieHealthStatus,
    CookieRecord,
    CredentialSet,
    ExtractionStrategy,
    PrefetchSummary,
    RedirectTarget,
    RunLog,
    RunLogEntry,
    RunLogFile,
    VideoMetadata,
    artifact_key,
    metadata_key,
    validate_video_id,
)
from .strategy_plan import StrategyPlan

__all__ = [
    "AudioArtifact",
    "CookieHealth",
    "CookieHealthStatus",
    "CookieRecord",
    "CredentialSet",
    "ExtractionStrategy",
    "PrefetchSummary",
    "RedirectTarget",
    "RunLog",
    "RunLogEntry",
    "RunLogFile",
    "StrategyPlan",
    "VideoMetadata",
    "artifact_key",
    "credential_file",
    "evaluate_cookie_health",
    "from_native_format",
    "metadata_key",
    "parse_cookie_export",
    "to_native_format",
    "validate_video_id",
]
