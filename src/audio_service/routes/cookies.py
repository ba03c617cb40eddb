"""Cookie health endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from mytube_common import StorageUnavailable

from audio_service.dependencies import get_cookie_status_handler, verify_api_key
from audio_service.domain import CookieHealthStatus
from audio_service.exceptions import CredentialFormatError
from audio_service.handlers import CookieStatusHandler
from audio_service.response_models import CookieStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cookies"], dependencies=[Depends(verify_api_key)])

CookieStatusDep = Annotated[CookieStatusHandler, Depends(get_cookie_status_handler)]


@router.get("/cookie-status", response_model=CookieStatusResponse)
def cookie_status(handler: CookieStatusDep):
    """Returns the health of the uploaded cookie export."""
    try:
        health = handler.status()
    except CredentialFormatError as e:
        logger.error("Cookie export is malformed", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))
    except StorageUnavailable:
        raise HTTPException(status_code=503, detail="Storage unavailable")

    if health is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": "Cookies not found",
                "status": CookieHealthStatus.MISSING.value,
            },
        )
    return CookieStatusResponse.from_health(health)
