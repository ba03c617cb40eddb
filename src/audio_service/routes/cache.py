"""Batch cache check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from audio_service.dependencies import get_cache_check_handler, verify_api_key
from audio_service.handlers import CacheCheckHandler
from audio_service.response_models import CacheCheckRequest, CacheCheckResponse

router = APIRouter(tags=["cache"], dependencies=[Depends(verify_api_key)])

CacheCheckDep = Annotated[CacheCheckHandler, Depends(get_cache_check_handler)]


def _check(handler: CacheCheckHandler, ids: list[str]) -> CacheCheckResponse:
    ids = [video_id.strip() for video_id in ids if video_id and video_id.strip()]
    if not ids:
        raise HTTPException(status_code=400, detail="Invalid ids list")

    found, missing = handler.check(ids)
    return CacheCheckResponse(found=found, missing=missing)


@router.post("/check-cache", response_model=CacheCheckResponse)
def check_cache(request: CacheCheckRequest, handler: CacheCheckDep):
    """Reports which of the posted video ids are already cached."""
    return _check(handler, request.ids)


@router.get("/check-cache", response_model=CacheCheckResponse)
def check_cache_query(
    handler: CacheCheckDep,
    ids: Annotated[str, Query(description="Comma-separated video ids")] = "",
):
    """Same as the POST variant, reading ``?ids=a,b``."""
    return _check(handler, ids.split(","))
