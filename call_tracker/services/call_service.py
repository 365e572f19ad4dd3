import asyncio
import logging
from fastapi import HTTPException
from typing import List, Optional
from call_tracker.models.schemas import (
    AppSettings,
    CallRecord,
    CallStatus,
    DashboardResponse,
    RejectionReason,
)
from call_tracker.repositories.record_store import RecordStore
from call_tracker.services import stats_service, webhook_service
from call_tracker.services.report_scheduler import send_daily_report
from call_tracker.services.webhook_service import DispatchResult
from call_tracker.utils.helper import date_str

logger = logging.getLogger(__name__)


class CallController:
    """Handles what the user does: log a call, send a report, edit settings, reset.

    ``calls`` is the in-memory view of the call list. It is loaded at
    start-up, extended on each submission and reloaded after a reset.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self.calls: List[CallRecord] = store.list_calls()

    def reload(self):
        self.calls = self.store.list_calls()

    def today(self) -> str:
        return date_str(self.store.clock())

    # ---------- CALLS ----------

    def submit_call(self, status: CallStatus, reason: Optional[RejectionReason] = None) -> CallRecord:
        if status == CallStatus.NO_DEAL and reason is None:
            raise HTTPException(status_code=400, detail="Please choose a rejection reason")
        if status == CallStatus.DEAL and reason is not None:
            raise HTTPException(status_code=400, detail="A deal cannot carry a rejection reason")

        record = self.store.append_call(status, reason)
        self.calls.append(record)
        return record

    async def notify_call(self, record: CallRecord) -> Optional[DispatchResult]:
        """Push one call to the webhook. Failures are logged, the saved call stays."""
        app_settings = self.store.get_settings()
        if not app_settings.webhook_url:
            return None

        payload = stats_service.build_single_call_payload(app_settings, record)
        result = await asyncio.to_thread(
            webhook_service.send_to_webhook, app_settings.webhook_url, payload
        )
        if not result:
            logger.warning("Single call webhook failed for %s: %s", record.id, result.error)
        return result

    def list_calls(self, day: Optional[str] = None) -> List[CallRecord]:
        if day is None:
            return list(self.calls)
        return [c for c in self.calls if c.date_str == day]

    def clear_history(self):
        self.store.clear_call_history()
        self.reload()

    # ---------- DASHBOARD / REPORTS ----------

    def dashboard(self, day: Optional[str] = None) -> DashboardResponse:
        day = day or self.today()
        stats = stats_service.compute_daily_stats(self.list_calls(day), day)
        last_report = self.store.get_last_report_date()
        return DashboardResponse(
            stats=stats,
            breakdown=stats_service.rejection_breakdown(stats),
            last_report_date=last_report,
            report_sent_today=last_report == self.today(),
        )

    async def send_manual_report(self) -> dict:
        app_settings = self.store.get_settings()
        if not app_settings.webhook_url:
            raise HTTPException(
                status_code=400,
                detail="Webhook URL is not configured. Set it in settings first.",
            )

        today = self.today()
        result = await asyncio.to_thread(
            send_daily_report, self.store, app_settings, self.list_calls(today), today
        )
        if not result:
            raise HTTPException(status_code=502, detail="Failed to send daily report")

        return {"status": "sent", "date": today}

    # ---------- SETTINGS ----------

    def get_settings(self) -> AppSettings:
        return self.store.get_settings()

    def save_settings(self, app_settings: AppSettings) -> AppSettings:
        self.store.save_settings(app_settings)
        return app_settings

    async def test_connection(self, app_settings: Optional[AppSettings] = None) -> dict:
        app_settings = app_settings or self.store.get_settings()
        if not app_settings.webhook_url:
            raise HTTPException(status_code=400, detail="Please enter a webhook URL")

        result = await asyncio.to_thread(webhook_service.send_test, app_settings)
        if not result:
            raise HTTPException(status_code=502, detail="Webhook connection failed")
        return {"status": "ok"}

    def factory_reset(self):
        self.store.factory_reset()
        self.reload()
