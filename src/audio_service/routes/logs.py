"""Run log browsing endpoint."""

import logging
import re
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from mytube_common import ObjectNotFound, StorageUnavailable

from audio_service.dependencies import get_run_log_reader, verify_api_key
from audio_service.infrastructure import RunLogReader
from audio_service.response_models import (
    LogDatesResponse,
    LogFileResponse,
    LogFilesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["logs"], dependencies=[Depends(verify_api_key)])

RunLogReaderDep = Annotated[RunLogReader, Depends(get_run_log_reader)]

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_FILE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.json$")


@router.get("/logs")
def get_logs(
    reader: RunLogReaderDep,
    date: Annotated[str | None, Query()] = None,
    log_file: Annotated[str | None, Query(alias="logFile")] = None,
):
    """
    Browses stored job logs.

    Without parameters lists the dates that have logs; with ``date`` lists
    that day's files; with ``date`` and ``logFile`` returns one log.
    """
    if date is not None and not _DATE_PATTERN.match(date):
        raise HTTPException(status_code=400, detail="Invalid date")
    if log_file is not None and (date is None or not _FILE_PATTERN.match(log_file)):
        raise HTTPException(status_code=400, detail="Invalid logFile")

    try:
        if log_file:
            return reader.read(date, log_file).model_dump(mode="json")
        if date:
            files = [LogFileResponse.from_file(f) for f in reader.list_files(date)]
            return LogFilesResponse(files=files).model_dump(mode="json", by_alias=True)
        return LogDatesResponse(dates=reader.list_dates())
    except ObjectNotFound:
        raise HTTPException(status_code=404, detail="Log not found")
    except StorageUnavailable as e:
        logger.error("Error fetching logs", extra={"error": str(e)})
        raise HTTPException(status_code=503, detail="Storage unavailable")
