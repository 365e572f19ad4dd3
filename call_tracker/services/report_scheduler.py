import asyncio
import logging
from contextlib import suppress
from datetime import datetime
from typing import Callable, Optional, Sequence
from call_tracker.models.schemas import AppSettings, CallRecord
from call_tracker.repositories.record_store import RecordStore
from call_tracker.services import stats_service, webhook_service
from call_tracker.services.webhook_service import DispatchResult
from call_tracker.utils.helper import date_str, hhmm, local_now

logger = logging.getLogger(__name__)


def send_daily_report(
    store: RecordStore,
    app_settings: AppSettings,
    calls: Sequence[CallRecord],
    day: str,
) -> DispatchResult:
    """Aggregate, dispatch, and mark ``day`` as reported when the webhook accepts it."""
    stats = stats_service.compute_daily_stats(calls, day)
    payload = stats_service.build_daily_payload(app_settings, stats)

    result = webhook_service.send_to_webhook(app_settings.webhook_url, payload)
    if result:
        store.set_last_report_date(day)
    return result


class ReportScheduler:
    """Sends the daily summary once the configured HH:MM is reached.

    A day is pending until a dispatch succeeds and the last-report marker
    equals today. A failed dispatch leaves it pending, so the next tick
    inside the same minute tries again.
    """

    def __init__(
        self,
        store: RecordStore,
        interval_seconds: int = 60,
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    async def check(self) -> Optional[DispatchResult]:
        app_settings = self.store.get_settings()
        if not app_settings.webhook_url or not app_settings.daily_report_time:
            return None

        now = self.clock()
        today = date_str(now)

        if hhmm(now) != app_settings.daily_report_time:
            return None
        if self.store.get_last_report_date() == today:
            return None

        logger.info("Triggering auto daily report for %s", today)
        todays_calls = self.store.calls_on_date(today)

        # send and mark in one worker call so cancelling the loop cannot drop the marker
        result = await asyncio.to_thread(
            send_daily_report, self.store, app_settings, todays_calls, today
        )

        if result:
            logger.info("Daily report sent automatically for %s", today)
        else:
            logger.warning("Auto daily report for %s failed: %s", today, result.error)
        return result

    async def run(self):
        while True:
            try:
                await self.check()
            except Exception:
                logger.exception("Daily report check crashed")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
