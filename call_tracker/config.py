# call_tracker/config.py
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv
load_dotenv()

class Settings:

    def __init__(self):
        self.BACKEND_HOST = os.getenv('BACKEND_HOST', '0.0.0.0')
        self.BACKEND_PORT = int(os.getenv('BACKEND_PORT', '8000'))

        self.DB_PATH = os.getenv('DATABASE_PATH', 'call_tracker.db')
        self.REPORT_CHECK_INTERVAL_SECONDS = int(os.getenv('REPORT_CHECK_INTERVAL_SECONDS', '60'))
        self.REPORT_TIMEZONE = os.getenv('REPORT_TIMEZONE', '')

        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

        self._validate()

    def _validate(self):
        if self.REPORT_CHECK_INTERVAL_SECONDS <= 0:
            raise RuntimeError("REPORT_CHECK_INTERVAL_SECONDS must be positive.")

        if self.REPORT_TIMEZONE:
            try:
                ZoneInfo(self.REPORT_TIMEZONE)
            except (ZoneInfoNotFoundError, ValueError):
                raise RuntimeError(f"Unknown REPORT_TIMEZONE: {self.REPORT_TIMEZONE}")

    @property
    def tz(self):
        return ZoneInfo(self.REPORT_TIMEZONE) if self.REPORT_TIMEZONE else None


settings = Settings()
