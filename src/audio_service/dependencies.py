"""Dependency injection configuration for the audio service."""

import secrets
from functools import lru_cache
from typing import Annotated

import httpx
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from fastapi import Depends, Header
from minio import Minio
from mytube_common.infrastructure import ArtifactStore

from audio_service.config import AppConfig, load_config
from audio_service.exceptions import AuthError
from audio_service.handlers import (
    CacheCheckHandler,
    CleanupHandler,
    CookieStatusHandler,
    DeliveryHandler,
    ExtractionOrchestrator,
    PrefetchHandler,
)
from audio_service.infrastructure import (
    CredentialProvider,
    MinioArtifactStore,
    RunLogReader,
    StoredChannelPreferences,
    YouTubeFeedSource,
    YtDlpTool,
)
from audio_service.infrastructure.interfaces import ExtractionTool
from audio_service.worker import Worker

FEED_TIMEOUT_SECONDS = 15.0


@lru_cache
def get_config() -> AppConfig:
    """Returns the configuration loaded from the environment."""
    return load_config()


@lru_cache
def get_minio_client() -> Minio:
    storage = get_config().storage
    return Minio(
        endpoint=storage.endpoint,
        access_key=storage.access_key,
        secret_key=storage.secret_key,
        region=storage.region,
        secure=storage.secure,
    )


@lru_cache
def get_storage() -> ArtifactStore:
    """Returns the configured artifact store."""
    return MinioArtifactStore(get_minio_client(), get_config().storage.bucket_name)


def get_credential_provider() -> CredentialProvider:
    return CredentialProvider(get_storage())


def get_extraction_tool() -> ExtractionTool:
    return YtDlpTool(get_config().extraction)


def get_orchestrator() -> ExtractionOrchestrator:
    return ExtractionOrchestrator(
        storage=get_storage(),
        tool=get_extraction_tool(),
        credentials=get_credential_provider(),
        config=get_config().extraction,
    )


def get_delivery_handler() -> DeliveryHandler:
    return DeliveryHandler(get_storage(), get_orchestrator(), get_config().storage)


def get_cache_check_handler() -> CacheCheckHandler:
    return CacheCheckHandler(get_storage())


def get_cookie_status_handler() -> CookieStatusHandler:
    return CookieStatusHandler(get_storage(), get_credential_provider())


def get_run_log_reader() -> RunLogReader:
    return RunLogReader(get_storage())


@lru_cache
def get_feed_client() -> httpx.Client:
    return httpx.Client(timeout=FEED_TIMEOUT_SECONDS, follow_redirects=True)


def get_prefetch_handler() -> PrefetchHandler:
    return PrefetchHandler(
        storage=get_storage(),
        orchestrator=get_orchestrator(),
        preferences=StoredChannelPreferences(get_storage()),
        feeds=YouTubeFeedSource(get_feed_client()),
        recent_entries=get_config().scheduler.prefetch_recent_entries,
    )


def get_cleanup_handler() -> CleanupHandler:
    return CleanupHandler(get_storage(), get_config().scheduler.cleanup_max_age_days)


def build_worker(scheduler: BaseScheduler | None = None) -> Worker:
    """Wires a worker around ``scheduler`` (a background one by default)."""
    return Worker(
        scheduler=scheduler or BackgroundScheduler(timezone="UTC"),
        storage=get_storage(),
        prefetch=get_prefetch_handler(),
        cleanup=get_cleanup_handler(),
        config=get_config().scheduler,
    )


def get_api_secret() -> str:
    return get_config().api_secret


def verify_api_key(
    expected: Annotated[str, Depends(get_api_secret)],
    x_api_key: Annotated[str | None, Header(alias="x-api-key")] = None,
) -> None:
    """
    Rejects requests without the configured shared secret.

    Every request is rejected while no secret is configured.

    Raises:
        AuthError: If the header is missing or does not match.
    """
    if not expected or not x_api_key:
        raise AuthError()
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise AuthError()
