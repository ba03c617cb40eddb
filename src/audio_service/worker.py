"""Worker that schedules the periodic prefetch and cleanup jobs."""

import logging

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from mytube_common.infrastructure import ArtifactStore

from audio_service.config import SchedulerConfig
from audio_service.handlers import CleanupHandler, PrefetchHandler
from audio_service.infrastructure import RunLogRecorder

logger = logging.getLogger(__name__)

PREFETCH_JOB_ID = "prefetch"
CLEANUP_JOB_ID = "cleanup"


class Worker:
    """Registers the scheduled jobs and runs each of them under a run log."""

    def __init__(
        self,
        scheduler: BaseScheduler,
        storage: ArtifactStore,
        prefetch: PrefetchHandler,
        cleanup: CleanupHandler,
        config: SchedulerConfig,
    ):
        self._scheduler = scheduler
        self._storage = storage
        self._prefetch = prefetch
        self._cleanup = cleanup
        self._config = config

    def register_jobs(self) -> None:
        """Adds both jobs to the scheduler, replacing earlier registrations."""
        self._scheduler.add_job(
            self.run_prefetch,
            trigger=IntervalTrigger(
                hours=self._config.prefetch_interval_hours, timezone="UTC"
            ),
            id=PREFETCH_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.add_job(
            self.run_cleanup,
            trigger=CronTrigger(
                hour=self._config.cleanup_hour_utc, minute=0, timezone="UTC"
            ),
            id=CLEANUP_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(
            "Scheduled jobs registered",
            extra={
                "prefetch_interval_hours": self._config.prefetch_interval_hours,
                "cleanup_hour_utc": self._config.cleanup_hour_utc,
            },
        )

    def start(self) -> None:
        """Registers the jobs and starts the scheduler."""
        self.register_jobs()
        logger.info("Worker initialized, starting scheduler")
        self._scheduler.start()

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    def run_prefetch(self) -> None:
        with RunLogRecorder(self._storage, "prefetch"):
            try:
                self._prefetch.run()
            except Exception:
                logger.exception("Prefetch job failed")

    def run_cleanup(self) -> None:
        with RunLogRecorder(self._storage, "cleanup"):
            try:
                self._cleanup.run()
            except Exception:
                logger.exception("Cleanup job failed")
