from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class CallStatus(str, Enum):
    DEAL = 'deal'
    NO_DEAL = 'no-deal'


# Declaration order is the tie-break order for the top rejection reason.
class RejectionReason(str, Enum):
    NO_MONEY = 'No Money'
    NO_CREDIT = 'No Credit'
    NOT_INTERESTED = 'Not Interested'
    OTHER = 'Other'


class CallRecord(BaseModel):
    id: str
    timestamp: datetime
    date_str: str
    status: CallStatus
    rejection_reason: Optional[RejectionReason] = None


class AppSettings(BaseModel):
    agent_name: str = ''
    webhook_url: str = ''
    daily_report_time: str = Field('18:00', pattern=r'^$|^([01]\d|2[0-3]):[0-5]\d$')


class DailyStats(BaseModel):
    date: str
    total_calls: int
    total_sales: int
    failed_total: int
    conversion_rate: str
    top_rejection_reason: str
    rejection_counts: Dict[str, int]


# Flat on purpose: the spreadsheet automation on the other end cannot read nested JSON.
class WebhookPayload(BaseModel):
    type: str
    agent_name: str
    timestamp: Optional[str] = None
    date: Optional[str] = None

    call_status: Optional[str] = None
    rejection_reason: Optional[str] = None

    total_calls: Optional[int] = None
    total_sales: Optional[int] = None
    failed_total: Optional[int] = None
    conversion_rate: Optional[str] = None
    top_rejection_reason: Optional[str] = None

    count_no_money: Optional[int] = None
    count_no_credit: Optional[int] = None
    count_not_interested: Optional[int] = None
    count_other: Optional[int] = None


class CallCreate(BaseModel):
    status: CallStatus
    rejection_reason: Optional[RejectionReason] = None


class DashboardResponse(BaseModel):
    stats: DailyStats
    breakdown: List[Dict[str, Any]]
    last_report_date: Optional[str] = None
    report_sent_today: bool
