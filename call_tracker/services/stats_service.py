from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence
from call_tracker.models.schemas import (
    AppSettings,
    CallRecord,
    CallStatus,
    DailyStats,
    RejectionReason,
    WebhookPayload,
)
from call_tracker.utils.helper import utc_iso

REASON_ORDER = list(RejectionReason)


def compute_daily_stats(calls: Sequence[CallRecord], day: str) -> DailyStats:
    """Aggregate one day's calls.

    Pure: the same list and date always give the same result. The caller
    filters ``calls`` to ``day``; nothing here re-checks the dates.

    ``top_rejection_reason`` is "N/A" when there are no failures and
    "None" when failures exist but none carries a reason. Ties go to the
    reason declared first in ``RejectionReason``.
    """
    total_calls = len(calls)
    total_sales = sum(1 for c in calls if c.status == CallStatus.DEAL)
    failed_total = total_calls - total_sales

    rejection_counts: Dict[str, int] = {reason.value: 0 for reason in REASON_ORDER}
    for call in calls:
        if call.status == CallStatus.NO_DEAL and call.rejection_reason:
            rejection_counts[call.rejection_reason.value] += 1

    top_rejection_reason = 'N/A'
    if failed_total > 0:
        max_count = -1
        for reason in REASON_ORDER:
            count = rejection_counts[reason.value]
            if count > max_count:
                max_count = count
                top_rejection_reason = reason.value
        if max_count == 0:
            top_rejection_reason = 'None'

    if total_calls > 0:
        rate = Decimal(total_sales / total_calls * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        conversion_rate = f"{rate}%"
    else:
        conversion_rate = '0%'

    return DailyStats(
        date=day,
        total_calls=total_calls,
        total_sales=total_sales,
        failed_total=failed_total,
        conversion_rate=conversion_rate,
        top_rejection_reason=top_rejection_reason,
        rejection_counts=rejection_counts,
    )


def rejection_breakdown(stats: DailyStats) -> List[Dict[str, object]]:
    """Non-zero reasons in declared order, ready for a chart."""
    return [
        {"name": reason.value, "value": stats.rejection_counts.get(reason.value, 0)}
        for reason in REASON_ORDER
        if stats.rejection_counts.get(reason.value, 0) > 0
    ]


def build_daily_payload(app_settings: AppSettings, stats: DailyStats) -> WebhookPayload:
    counts = stats.rejection_counts
    return WebhookPayload(
        type='daily_summary',
        agent_name=app_settings.agent_name,
        date=stats.date,
        total_calls=stats.total_calls,
        total_sales=stats.total_sales,
        failed_total=stats.failed_total,
        conversion_rate=stats.conversion_rate,
        top_rejection_reason=stats.top_rejection_reason,
        count_no_money=counts.get(RejectionReason.NO_MONEY.value, 0),
        count_no_credit=counts.get(RejectionReason.NO_CREDIT.value, 0),
        count_not_interested=counts.get(RejectionReason.NOT_INTERESTED.value, 0),
        count_other=counts.get(RejectionReason.OTHER.value, 0),
    )


def build_single_call_payload(app_settings: AppSettings, call: CallRecord) -> WebhookPayload:
    return WebhookPayload(
        type='single_call',
        agent_name=app_settings.agent_name,
        timestamp=utc_iso(call.timestamp),
        call_status=call.status.value,
        rejection_reason=call.rejection_reason.value if call.rejection_reason else '',
    )
