"""
Prefetch Worker.

Standalone entry point running the scheduled jobs in the foreground.
"""

from apscheduler.schedulers.blocking import BlockingScheduler
from ddtrace import patch_all
from mytube_common import setup_logging

from audio_service.dependencies import build_worker

patch_all()


def main():
    """Starts the worker."""
    logger = setup_logging(service="mytube-worker")
    worker = build_worker(BlockingScheduler(timezone="UTC"))
    try:
        worker.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Worker interrupted")


if __name__ == "__main__":
    main()
