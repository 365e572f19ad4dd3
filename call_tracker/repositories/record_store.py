import json
import uuid
from typing import Callable, List, Optional
from datetime import datetime
from call_tracker.db.kv_store import KeyValueStore
from call_tracker.models.schemas import AppSettings, CallRecord, CallStatus, RejectionReason
from call_tracker.utils.helper import date_str, local_now

KEYS = {
    'CALLS': 'app_calls_v5',
    'SETTINGS': 'app_settings_v5',
    'LAST_REPORT_DATE': 'app_last_report_date_v5',
}


class RecordStore:
    """Call records, user settings and the last-report marker.

    Caller contract: ``rejection_reason`` only accompanies ``no-deal``.
    The store does not check it.
    """

    def __init__(self, kv: KeyValueStore, clock: Callable[[], datetime] = local_now):
        self.kv = kv
        self.clock = clock

    # ---------- CALLS ----------

    def list_calls(self) -> List[CallRecord]:
        stored = self.kv.get(KEYS['CALLS'])
        if not stored:
            return []
        return [CallRecord.model_validate(item) for item in json.loads(stored)]

    def append_call(self, status: CallStatus, reason: Optional[RejectionReason] = None) -> CallRecord:
        calls = self.list_calls()
        now = self.clock()

        record = CallRecord(
            id=str(uuid.uuid4()),
            timestamp=now,
            date_str=date_str(now),
            status=status,
            rejection_reason=reason,
        )

        calls.append(record)
        self._write_calls(calls)
        return record

    def calls_on_date(self, day: str) -> List[CallRecord]:
        return [c for c in self.list_calls() if c.date_str == day]

    def _write_calls(self, calls: List[CallRecord]):
        self.kv.set(
            KEYS['CALLS'],
            json.dumps([c.model_dump(mode='json') for c in calls])
        )

    # ---------- SETTINGS ----------

    def get_settings(self) -> AppSettings:
        stored = self.kv.get(KEYS['SETTINGS'])
        return AppSettings.model_validate_json(stored) if stored else AppSettings()

    def save_settings(self, app_settings: AppSettings):
        self.kv.set(KEYS['SETTINGS'], app_settings.model_dump_json())

    # ---------- DAILY REPORT MARKER ----------

    def get_last_report_date(self) -> Optional[str]:
        return self.kv.get(KEYS['LAST_REPORT_DATE'])

    def set_last_report_date(self, day: str):
        self.kv.set(KEYS['LAST_REPORT_DATE'], day)

    # ---------- MAINTENANCE ----------

    def clear_call_history(self):
        self.kv.remove(KEYS['CALLS'])
        self.kv.remove(KEYS['LAST_REPORT_DATE'])

    def factory_reset(self):
        """Remove everything, settings included. Callers reload their state afterwards."""
        self.kv.clear()
