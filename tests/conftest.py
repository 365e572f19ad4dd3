from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
import requests
from fastapi.testclient import TestClient

from call_tracker.config import Settings
from call_tracker.db.init_db import init_db
from call_tracker.db.kv_store import KeyValueStore
from call_tracker.main import create_app
from call_tracker.repositories.record_store import RecordStore
from call_tracker.services import webhook_service

HOOK_URL = "https://hook.example.com/abc123"
FIXED_NOW = datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeResponse:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code


class WebhookRecorder:
    """Stands in for ``requests.post`` and remembers every request."""

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.status_code = 200
        self.error: Exception | None = None

    def post(self, url, data=None, headers=None, **kwargs):
        self.requests.append({"url": url, "body": json.loads(data), "headers": headers})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)

    def fail_with_status(self, status_code: int) -> None:
        self.status_code = status_code

    def fail_with_error(self, message: str = "connection refused") -> None:
        self.error = requests.ConnectionError(message)

    @property
    def bodies(self) -> list[dict]:
        return [r["body"] for r in self.requests]


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "calls.db")
    init_db(path)
    return path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture
def store(db_path, clock) -> RecordStore:
    return RecordStore(KeyValueStore(db_path), clock=clock)


@pytest.fixture
def webhook(monkeypatch) -> WebhookRecorder:
    recorder = WebhookRecorder()
    monkeypatch.setattr(webhook_service.requests, "post", recorder.post)
    return recorder


@pytest.fixture
def client(db_path, clock, webhook):
    config = Settings()
    config.DB_PATH = db_path
    config.REPORT_CHECK_INTERVAL_SECONDS = 3600
    app = create_app(config, clock=clock)
    with TestClient(app) as c:
        yield c
