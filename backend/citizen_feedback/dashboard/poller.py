# backend/citizen_feedback/dashboard/poller.py
"""
Polling client for dashboard consumers.

One configurable refresh cadence for every view, driven by an APScheduler
interval job. Overlapping polls are suppressed, teardown cancels the job
together with any in-flight request, and the first-load / refresh
distinction travels with each Snapshot instead of living in shared state.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Union

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pydantic import ValidationError

from citizen_feedback.analytics.pipeline import PipelineParams, build_view
from citizen_feedback.core.config import settings
from citizen_feedback.schemas.analytics import AnalyticsView
from citizen_feedback.schemas.feedback import FeedbackRecord

logger = logging.getLogger(__name__)

FAILED_TO_LOAD = "failed to load"
FEEDBACK_PATH = "/api/feedback"
POLL_JOB_ID = "feedback_poll"


@dataclass(frozen=True)
class Snapshot:
    records: List[FeedbackRecord]
    fetched_at: datetime
    initial: bool
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def failed(cls, initial: bool) -> "Snapshot":
        return cls(records=[], fetched_at=datetime.now(timezone.utc), initial=initial, ok=False, error=FAILED_TO_LOAD)


SnapshotCallback = Callable[[Snapshot], Union[None, Awaitable[None]]]


class FeedbackPoller:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        interval: Optional[float] = None,
        on_snapshot: Optional[SnapshotCallback] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token
        self.interval = settings.POLL_INTERVAL_SECONDS if interval is None else interval
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        self.on_snapshot = on_snapshot

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=30.0, transport=transport)
        self._lock = asyncio.Lock()
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._initial_pending = False
        self._inflight: Optional[asyncio.Future] = None
        self.last_snapshot: Optional[Snapshot] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, initial: bool) -> Snapshot:
        try:
            response = await self._client.get(f"{self.base_url}{FEEDBACK_PATH}", headers=self._headers())
            response.raise_for_status()
            records = [FeedbackRecord.model_validate(item) for item in response.json()]
        except (httpx.HTTPError, ValueError, ValidationError, TypeError) as e:
            # every failure looks the same to the views
            logger.warning("Feedback poll failed: %s", e)
            return Snapshot.failed(initial)

        return Snapshot(records=records, fetched_at=datetime.now(timezone.utc), initial=initial)

    async def _deliver(self, snapshot: Snapshot):
        if self.on_snapshot is None:
            return
        try:
            result = self.on_snapshot(snapshot)
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            # the schedule keeps running past a failing consumer
            logger.exception("Snapshot callback failed")

    async def fetch(self, initial: bool = False) -> Optional[Snapshot]:
        """
        Fetch one snapshot and hand it to on_snapshot.
        Returns None without fetching when another fetch is still in flight.
        """
        if self._lock.locked():
            logger.debug("Poll skipped: previous fetch still in flight")
            return None

        async with self._lock:
            self._inflight = asyncio.ensure_future(self._request(initial))
            try:
                snapshot = await self._inflight
            finally:
                self._inflight = None

            self.last_snapshot = snapshot
            await self._deliver(snapshot)
            return snapshot

    async def retry(self) -> Optional[Snapshot]:
        return await self.fetch(initial=False)

    async def _refresh_job(self):
        initial, self._initial_pending = self._initial_pending, False
        await self.fetch(initial=initial)

    def start(self):
        """
        Schedule the refresh job. The first run fires immediately and is
        reported as the initial load.
        """
        if self.running:
            logger.warning("Feedback poller already running")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._initial_pending = True
        self._scheduler.add_job(
            func=self._refresh_job,
            trigger=IntervalTrigger(seconds=self.interval),
            id=POLL_JOB_ID,
            name=f"Feedback poll (every {self.interval:g} seconds)",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(timezone.utc),
        )
        self._scheduler.start()
        logger.info("Feedback poller started against %s", self.base_url)

    async def stop(self):
        """
        Stop the schedule and cancel any in-flight request; close the client if we own it.
        """
        try:
            if self._scheduler is not None and self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None

            inflight = self._inflight
            if inflight is not None and not inflight.done():
                inflight.cancel()
                try:
                    await inflight
                except asyncio.CancelledError:
                    pass
            self._inflight = None
        finally:
            if self._owns_client:
                await self._client.aclose()


@dataclass
class DashboardFeed:
    """
    Keeps the latest AnalyticsView, recomputed in full from every successful snapshot.
    A failed refresh leaves the previous view in place and sets `error`.
    """
    params: PipelineParams = field(default_factory=PipelineParams)
    view: Optional[AnalyticsView] = None
    error: Optional[str] = None
    loading: bool = True

    def on_snapshot(self, snapshot: Snapshot) -> None:
        if snapshot.initial:
            self.loading = False
        if not snapshot.ok:
            self.error = snapshot.error
            if self.view is None:
                self.view = build_view([], self.params)
            return
        self.error = None
        self.view = build_view(snapshot.records, self.params)

    def poller(self, **kwargs) -> FeedbackPoller:
        return FeedbackPoller(on_snapshot=self.on_snapshot, **kwargs)
