"""Orchestrates the strategy fallback loop and artifact upload."""

import json
import logging
import tempfile
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from datetime import datetime, timezone
from pathlib import Path

from mytube_common import StorageUnavailable
from mytube_common.infrastructure import ArtifactStore

from audio_service.config import ExtractionConfig
from audio_service.domain import (
    AudioArtifact,
    CredentialSet,
    ExtractionStrategy,
    StrategyPlan,
    VideoMetadata,
    artifact_key,
    credential_file,
    metadata_key,
)
from audio_service.domain.models import AUDIO_CONTENT_TYPE, METADATA_CONTENT_TYPE
from audio_service.exceptions import (
    CredentialFormatError,
    ExtractionExhausted,
    PartialUploadFailure,
    StrategyFailed,
    UpstreamForbidden,
)
from audio_service.infrastructure import CredentialProvider
from audio_service.infrastructure.interfaces import ExtractionTool

logger = logging.getLogger(__name__)

_FORBIDDEN_MARKERS = ("HTTP Error 403", "403: Forbidden", "Sign in to confirm")


class ExtractionOrchestrator:
    """Produces and stores the audio artifact of a video on a cache miss."""

    def __init__(
        self,
        storage: ArtifactStore,
        tool: ExtractionTool,
        credentials: CredentialProvider,
        config: ExtractionConfig,
    ):
        self._storage = storage
        self._tool = tool
        self._credentials = credentials
        self._config = config

    def extract(self, video_id: str) -> AudioArtifact:
        """
        Extracts the audio of ``video_id`` and stores it.

        Strategies are tried one at a time in plan order; the first one that
        yields a non-empty file wins. The audio upload must succeed, the
        metadata upload is best-effort.

        Args:
            video_id: A validated video identifier.

        Returns:
            The stored artifact.

        Raises:
            ExtractionExhausted: If every strategy of the plan failed.
            StorageUnavailable: If the audio upload failed.
        """
        credentials = self._load_credentials()
        plan = StrategyPlan.build(
            credentials_available=credentials is not None,
            max_attempts=self._config.max_attempts,
        )
        logger.info(
            "Extraction started",
            extra={
                "video_id": video_id,
                "plan": [strategy.label for strategy in plan.strategies],
            },
        )

        self._config.scratch_dir.mkdir(parents=True, exist_ok=True)
        with ExitStack() as stack:
            work_dir = Path(
                stack.enter_context(
                    tempfile.TemporaryDirectory(
                        prefix=f"{video_id}_", dir=self._config.scratch_dir
                    )
                )
            )
            cookie_file = None
            if credentials is not None:
                cookie_file = stack.enter_context(credential_file(credentials, work_dir))

            audio_path = work_dir / f"{video_id}.m4a"
            strategy = self._run_plan(video_id, plan, audio_path, cookie_file)
            return self._store(video_id, strategy, audio_path)

    def _load_credentials(self) -> CredentialSet | None:
        try:
            credentials = self._credentials.load()
        except (StorageUnavailable, CredentialFormatError):
            logger.warning(
                "Credentials unavailable, continuing without cookies", exc_info=True
            )
            return None
        if credentials is not None and len(credentials) == 0:
            return None
        return credentials

    def _run_plan(
        self,
        video_id: str,
        plan: StrategyPlan,
        audio_path: Path,
        cookie_file: Path | None,
    ) -> ExtractionStrategy:
        last_failure: StrategyFailed | None = None
        for attempt, strategy in enumerate(plan.strategies, start=1):
            try:
                self._attempt(video_id, strategy, audio_path, cookie_file)
            except StrategyFailed as e:
                last_failure = e
                logger.warning(
                    "Extraction strategy failed",
                    extra={
                        "video_id": video_id,
                        "attempt": attempt,
                        "strategy": strategy.label,
                        "forbidden": isinstance(e, UpstreamForbidden),
                        "diagnostics": e.diagnostics,
                    },
                )
                continue

            logger.info(
                "Extraction strategy succeeded",
                extra={
                    "video_id": video_id,
                    "attempt": attempt,
                    "strategy": strategy.label,
                },
            )
            return strategy

        diagnostics = last_failure.diagnostics if last_failure else "empty plan"
        logger.error(
            "Extraction exhausted",
            extra={"video_id": video_id, "attempts": len(plan)},
        )
        raise ExtractionExhausted(video_id, len(plan), diagnostics)

    def _attempt(
        self,
        video_id: str,
        strategy: ExtractionStrategy,
        audio_path: Path,
        cookie_file: Path | None,
    ) -> None:
        audio_path.unlink(missing_ok=True)
        result = self._tool.run(
            video_id,
            strategy,
            audio_path,
            cookie_file if strategy.use_credentials else None,
        )

        if result.exit_code != 0:
            error_type = (
                UpstreamForbidden
                if any(marker in result.diagnostics for marker in _FORBIDDEN_MARKERS)
                else StrategyFailed
            )
            raise error_type(
                video_id,
                strategy.label,
                f"exit code {result.exit_code}: {result.diagnostics}".strip(),
            )
        if not audio_path.is_file() or audio_path.stat().st_size == 0:
            raise StrategyFailed(
                video_id,
                strategy.label,
                f"tool exited cleanly but produced no audio at {audio_path.name}",
            )

    def _store(
        self, video_id: str, strategy: ExtractionStrategy, audio_path: Path
    ) -> AudioArtifact:
        audio = audio_path.read_bytes()
        metadata = self._read_metadata(video_id, strategy, audio_path)
        key = artifact_key(video_id)

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="upload") as pool:
            audio_upload = pool.submit(
                self._storage.put, key, audio, AUDIO_CONTENT_TYPE
            )
            metadata_upload = pool.submit(self._upload_metadata, video_id, metadata)
            audio_upload.result()
            metadata_stored = metadata_upload.result()

        logger.info(
            "Artifact stored",
            extra={
                "video_id": video_id,
                "object_name": key,
                "size": len(audio),
                "metadata_stored": metadata_stored,
            },
        )
        return AudioArtifact(
            video_id=video_id,
            key=key,
            byte_length=len(audio),
            uploaded_at=datetime.now(timezone.utc),
            metadata_stored=metadata_stored,
        )

    def _read_metadata(
        self, video_id: str, strategy: ExtractionStrategy, audio_path: Path
    ) -> VideoMetadata:
        info_path = audio_path.with_suffix(".info.json")
        if info_path.is_file():
            try:
                info = json.loads(info_path.read_text(encoding="utf-8"))
                return VideoMetadata.model_validate(
                    {**info, "id": info.get("id") or video_id, "strategy": strategy.label}
                )
            except ValueError:
                logger.warning(
                    "Unreadable info JSON", extra={"video_id": video_id}, exc_info=True
                )
        return VideoMetadata(id=video_id, strategy=strategy.label)

    def _upload_metadata(self, video_id: str, metadata: VideoMetadata) -> bool:
        try:
            self._storage.put(
                metadata_key(video_id),
                metadata.model_dump_json().encode("utf-8"),
                METADATA_CONTENT_TYPE,
            )
        except StorageUnavailable as e:
            failure = PartialUploadFailure(video_id, e)
            logger.warning(str(failure), extra={"video_id": video_id})
            return False
        return True
