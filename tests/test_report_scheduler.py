from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from call_tracker.models.schemas import AppSettings, CallStatus, RejectionReason
from call_tracker.services.report_scheduler import ReportScheduler
from tests.conftest import HOOK_URL


def _configure(store, report_time: str = "18:00", url: str = HOOK_URL) -> None:
    store.save_settings(AppSettings(agent_name="Dana", webhook_url=url, daily_report_time=report_time))


def _check(scheduler: ReportScheduler):
    return asyncio.run(scheduler.check())


def test_no_op_without_webhook_url(store, clock, webhook) -> None:
    _configure(store, url="")
    assert _check(ReportScheduler(store, clock=clock)) is None
    assert webhook.requests == []


def test_no_op_without_report_time(store, clock, webhook) -> None:
    _configure(store, report_time="")
    assert _check(ReportScheduler(store, clock=clock)) is None
    assert webhook.requests == []


def test_no_op_outside_report_minute(store, clock, webhook) -> None:
    _configure(store, report_time="18:01")
    assert _check(ReportScheduler(store, clock=clock)) is None
    assert webhook.requests == []
    assert store.get_last_report_date() is None


def test_no_dispatch_when_already_sent_today(store, clock, webhook) -> None:
    _configure(store)
    store.set_last_report_date("2024-01-01")
    assert _check(ReportScheduler(store, clock=clock)) is None
    assert webhook.requests == []


def test_sends_today_summary_and_marks_day(store, clock, webhook) -> None:
    _configure(store)
    store.append_call(CallStatus.DEAL)
    store.append_call(CallStatus.NO_DEAL, RejectionReason.NO_CREDIT)
    clock.now = datetime(2023, 12, 31, 18, 0, tzinfo=timezone.utc)
    store.append_call(CallStatus.DEAL)
    clock.now = datetime(2024, 1, 1, 18, 0, 30, tzinfo=timezone.utc)

    result = _check(ReportScheduler(store, clock=clock))

    assert result
    assert store.get_last_report_date() == "2024-01-01"
    body = webhook.bodies[0]
    assert body["type"] == "daily_summary"
    assert body["date"] == "2024-01-01"
    assert body["total_calls"] == 2
    assert body["count_no_credit"] == 1
    assert body["top_rejection_reason"] == "No Credit"


def test_second_tick_in_same_minute_does_not_resend(store, clock, webhook) -> None:
    _configure(store)
    scheduler = ReportScheduler(store, clock=clock)
    _check(scheduler)
    clock.now = datetime(2024, 1, 1, 18, 0, 59, tzinfo=timezone.utc)
    assert _check(scheduler) is None
    assert len(webhook.requests) == 1


def test_failure_stays_pending_and_retries_next_tick(store, clock, webhook) -> None:
    _configure(store)
    scheduler = ReportScheduler(store, clock=clock)

    webhook.fail_with_status(500)
    assert not _check(scheduler)
    assert store.get_last_report_date() is None

    webhook.status_code = 200
    assert _check(scheduler)
    assert store.get_last_report_date() == "2024-01-01"
    assert len(webhook.requests) == 2


def test_next_day_is_pending_again(store, clock, webhook) -> None:
    _configure(store)
    store.set_last_report_date("2024-01-01")
    clock.now = datetime(2024, 1, 2, 18, 0, tzinfo=timezone.utc)

    assert _check(ReportScheduler(store, clock=clock))
    assert store.get_last_report_date() == "2024-01-02"


def test_start_checks_immediately_and_stop_cancels(store, clock, webhook) -> None:
    _configure(store)

    async def _run() -> None:
        scheduler = ReportScheduler(store, interval_seconds=3600, clock=clock)
        task = scheduler.start()
        assert scheduler.start() is task
        for _ in range(200):
            if store.get_last_report_date():
                break
            await asyncio.sleep(0.01)
        await scheduler.stop()
        assert task.cancelled()

    asyncio.run(_run())
    assert store.get_last_report_date() == "2024-01-01"
    assert len(webhook.requests) == 1


def test_loop_survives_a_crashing_check(store, clock, webhook, monkeypatch) -> None:
    calls = []

    async def _boom() -> None:
        calls.append(1)
        raise RuntimeError("disk gone")

    async def _run() -> None:
        scheduler = ReportScheduler(store, interval_seconds=0, clock=clock)
        monkeypatch.setattr(scheduler, "check", _boom)
        scheduler.start()
        while len(calls) < 3:
            await asyncio.sleep(0.01)
        await scheduler.stop()

    asyncio.run(_run())
    assert len(calls) >= 3
