"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from ddtrace import patch_all
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mytube_common import StorageUnavailable, setup_logging
from starlette.exceptions import HTTPException as StarletteHTTPException

from audio_service.dependencies import build_worker, get_config
from audio_service.exceptions import AuthError
from audio_service.routes import audio_router, cache_router, cookies_router, logs_router

patch_all()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(service="mytube-audio")
    worker = None
    if get_config().scheduler.enabled:
        worker = build_worker()
        worker.start()
    yield
    if worker is not None:
        worker.shutdown()


app = FastAPI(title="MyTube Audio Service", lifespan=lifespan)
app.include_router(audio_router)
app.include_router(cache_router)
app.include_router(cookies_router)
app.include_router(logs_router)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    logger.warning("Rejected request", extra={"path": request.url.path})
    return JSONResponse(status_code=401, content={"error": str(exc)})


@app.exception_handler(StorageUnavailable)
async def storage_error_handler(
    request: Request, exc: StorageUnavailable
) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": "Storage unavailable"})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        message = "Invalid JSON"
    else:
        fields = sorted({str(error["loc"][-1]) for error in errors if error.get("loc")})
        message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    logger.info("Rejected malformed request", extra={"path": request.url.path})
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )
