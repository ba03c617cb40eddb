"""Per-run job logs persisted to the artifact store."""

import logging
import time
import uuid
from datetime import datetime, timezone

from mytube_common import StorageUnavailable
from mytube_common.infrastructure import ArtifactStore

from audio_service.domain import RunLog, RunLogEntry, RunLogFile
from audio_service.domain.models import LOGS_PREFIX, METADATA_CONTENT_TYPE

logger = logging.getLogger(__name__)


class _BufferHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.INFO)
        self.entries: list[RunLogEntry] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.entries.append(
            RunLogEntry(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
                level=record.levelname,
                message=record.getMessage(),
            )
        )


class RunLogRecorder:
    """
    Captures every log record emitted while a job runs and stores them.

    Usage::

        with RunLogRecorder(storage, "prefetch"):
            handler.run()

    The log lands at ``logs/{date}/{job}_{epoch_ms}_{uuid8}.json``. Failing
    to save it is logged and never interrupts the job.
    """

    def __init__(self, storage: ArtifactStore, job_name: str):
        self._storage = storage
        self._job_name = job_name
        self._handler = _BufferHandler()
        self._start = datetime.now(timezone.utc)
        self._monotonic_start = 0.0
        self.key: str | None = None

    def __enter__(self) -> "RunLogRecorder":
        self._start = datetime.now(timezone.utc)
        self._monotonic_start = time.monotonic()
        logging.getLogger().addHandler(self._handler)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        duration_ms = int((time.monotonic() - self._monotonic_start) * 1000)
        logger.info(
            "Finished execution",
            extra={"job": self._job_name, "duration_ms": duration_ms},
        )
        logging.getLogger().removeHandler(self._handler)
        self._save(duration_ms)

    def _save(self, duration_ms: int) -> None:
        epoch_ms = int(self._start.timestamp() * 1000)
        key = (
            f"{LOGS_PREFIX}{self._start.date().isoformat()}/"
            f"{self._job_name}_{epoch_ms}_{uuid.uuid4().hex[:8]}.json"
        )
        run_log = RunLog(
            job_name=self._job_name,
            start_time=self._start,
            duration_ms=duration_ms,
            logs=self._handler.entries,
        )
        try:
            self._storage.put(
                key,
                run_log.model_dump_json(indent=2).encode("utf-8"),
                METADATA_CONTENT_TYPE,
            )
        except StorageUnavailable:
            logger.exception("Failed to save run log", extra={"object_name": key})
            return
        self.key = key


class RunLogReader:
    """Browses stored run logs."""

    def __init__(self, storage: ArtifactStore):
        self._storage = storage

    def list_dates(self) -> list[str]:
        """Returns the dates that have logs, newest first."""
        dates = {
            obj.key[len(LOGS_PREFIX) :].split("/", 1)[0]
            for obj in self._storage.list_prefix(LOGS_PREFIX)
            if "/" in obj.key[len(LOGS_PREFIX) :]
        }
        return sorted(dates, reverse=True)

    def list_files(self, date: str) -> list[RunLogFile]:
        """Returns the logs of one date, newest first."""
        prefix = f"{LOGS_PREFIX}{date}/"
        files = []
        for obj in self._storage.list_prefix(prefix):
            filename = obj.key.rsplit("/", 1)[-1]
            parts = filename.removesuffix(".json").split("_")
            if len(parts) < 3 or not parts[-2].isdigit():
                continue
            files.append(
                RunLogFile(
                    filename=filename,
                    key=obj.key,
                    job_name="_".join(parts[:-2]),
                    timestamp=int(parts[-2]),
                    size=obj.byte_length,
                )
            )
        return sorted(files, key=lambda f: f.timestamp, reverse=True)

    def read(self, date: str, filename: str) -> RunLog:
        """
        Loads one stored log.

        Raises:
            ObjectNotFound: If the log does not exist.
        """
        raw = self._storage.get(f"{LOGS_PREFIX}{date}/{filename}")
        return RunLog.model_validate_json(raw)
