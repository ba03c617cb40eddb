"""Debounced, batched lookup of which videos are cached on the backend."""

import asyncio
import logging
from collections.abc import Iterable
from itertools import islice

import httpx

from player_client.config import BatcherConfig

logger = logging.getLogger(__name__)


class CacheStatusBatcher:
    """
    Collects video ids and checks them against ``/check-cache`` in batches.

    Every ``enqueue`` restarts a short debounce timer. When it fires, a batch
    run takes up to ``max_batch_size`` pending ids in insertion order and
    posts them in one request. Batch runs are independent tasks, so a later
    enqueue only cancels the timer and never a request already in flight.

    All methods must be called from the event loop that owns the batcher.
    """

    def __init__(self, config: BatcherConfig, client: httpx.AsyncClient | None = None):
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)
        self._url = f"{config.base_url.rstrip('/')}/check-cache"
        self._pending: dict[str, None] = {}
        self._present: set[str] = set()
        self._timer: asyncio.Task | None = None
        self._runs: set[asyncio.Task] = set()
        self._closed = False

    def enqueue(self, video_ids: str | Iterable[str]) -> None:
        """Queues ids for checking; ids already known present are ignored."""
        if isinstance(video_ids, str):
            video_ids = [video_ids]

        added = False
        for video_id in video_ids:
            if not video_id or video_id in self._present:
                continue
            self._pending[video_id] = None
            added = True

        if added:
            self._schedule()

    def is_known_present(self, video_id: str) -> bool:
        return video_id in self._present

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def flush(self) -> None:
        """Waits until no timer or batch run is outstanding."""
        while True:
            outstanding = [
                task for task in (self._timer, *self._runs) if task and not task.done()
            ]
            if not outstanding:
                return
            await asyncio.gather(*outstanding, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancels the timer, waits for in-flight runs and releases the client."""
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
        if self._runs:
            await asyncio.gather(*self._runs, return_exceptions=True)
        if self._owns_client:
            await self._client.aclose()

    def _schedule(self) -> None:
        if self._closed:
            return
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._debounce())

    async def _debounce(self) -> None:
        await asyncio.sleep(self._config.debounce_seconds)
        run = asyncio.get_running_loop().create_task(self._run_batch())
        self._runs.add(run)
        run.add_done_callback(self._runs.discard)

    async def _run_batch(self) -> None:
        batch = list(islice(self._pending, self._config.max_batch_size))
        for video_id in batch:
            del self._pending[video_id]

        if batch:
            await self._check(batch)

        if self._pending:
            self._schedule()

    async def _check(self, batch: list[str]) -> None:
        try:
            response = await self._client.post(
                self._url,
                json={"ids": batch},
                headers={"x-api-key": self._config.api_secret},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Cache status check failed",
                extra={"count": len(batch), "error": str(e)},
            )
            return

        found = payload.get("found", []) if isinstance(payload, dict) else []
        self._present.update(video_id for video_id in found if isinstance(video_id, str))
        logger.info(
            "Cache status checked",
            extra={"requested": len(batch), "found": len(found)},
        )
