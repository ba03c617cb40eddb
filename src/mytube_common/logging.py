import logging
import os
import sys

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"

# Loggers that install their own handlers and must be rerouted explicitly.
MANAGED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "apscheduler")


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        return logging.getLevelName(level.strip().upper()) if level.strip() else logging.INFO
    return level


def setup_logging(level: int | str | None = None, service: str | None = None):
    """
    Routes every log record to stdout as one JSON object per line.

    The root logger and the uvicorn/APScheduler loggers share one stream
    handler, so API requests, scheduled jobs and application code end up in
    the same structured stream. Records carry Datadog ``trace_id`` and
    ``span_id`` when ddtrace log injection is active.

    Args:
        level: Log level name or number. Defaults to ``LOG_LEVEL`` or INFO.
        service: Optional service name added to every record.

    Returns:
        logging.Logger: The configured root logger.
    """
    level = _resolve_level(level)
    static_fields = {"service": service} if service else {}
    formatter = jsonlogger.JsonFormatter(LOG_FORMAT, static_fields=static_fields)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in MANAGED_LOGGERS:
        managed = logging.getLogger(logger_name)
        managed.setLevel(level)
        managed.handlers = [stream_handler]
        managed.propagate = False

    return root_logger
