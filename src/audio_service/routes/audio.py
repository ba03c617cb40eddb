"""Audio delivery endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from mytube_common import StorageUnavailable

from audio_service.dependencies import get_delivery_handler, verify_api_key
from audio_service.exceptions import ExtractionExhausted, InvalidVideoId
from audio_service.handlers import DeliveryHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["audio"], dependencies=[Depends(verify_api_key)])

DeliveryDep = Annotated[DeliveryHandler, Depends(get_delivery_handler)]


@router.get("/audio", status_code=307, response_class=RedirectResponse)
def get_audio(
    handler: DeliveryDep,
    video_id: Annotated[str | None, Query(alias="videoId")] = None,
) -> RedirectResponse:
    """
    Redirects to the cached audio of a video.

    On a cache miss the audio is extracted and uploaded before answering,
    so the response is the same for both paths.
    """
    logger.info("Received audio request", extra={"video_id": video_id})

    try:
        target = handler.resolve(video_id)
    except InvalidVideoId as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExtractionExhausted as e:
        raise HTTPException(status_code=500, detail=e.diagnostics or str(e))
    except StorageUnavailable:
        raise HTTPException(status_code=503, detail="Storage unavailable")

    return RedirectResponse(url=target.url, status_code=307)
