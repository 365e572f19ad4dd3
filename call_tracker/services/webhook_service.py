import json
import logging
import requests
from dataclasses import dataclass
from typing import Optional
from call_tracker.models.schemas import AppSettings, WebhookPayload
from call_tracker.utils.helper import local_now, utc_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None

    def __bool__(self):
        return self.ok


def send_to_webhook(url: str, payload: WebhookPayload) -> DispatchResult:
    """POST ``payload`` as JSON to ``url`` once.

    Never raises: a bad URL, a non-2xx answer or a transport error all
    come back as a falsy result. No retry and no timeout.
    """
    if not url or not url.startswith('http'):
        logger.warning("Invalid webhook URL: %r", url)
        return DispatchResult(ok=False, error="invalid webhook url")

    try:
        response = requests.post(
            url,
            data=json.dumps(payload.model_dump(exclude_none=True)),
            headers={'Content-Type': 'application/json'},
        )
    except Exception as e:
        logger.warning("Webhook sending failed: %s", e)
        return DispatchResult(ok=False, error=str(e))

    if not 200 <= response.status_code < 300:
        logger.warning("Webhook answered HTTP %s", response.status_code)
        return DispatchResult(
            ok=False,
            status_code=response.status_code,
            error=f"HTTP error! status: {response.status_code}",
        )

    return DispatchResult(ok=True, status_code=response.status_code)


def send_test(app_settings: AppSettings) -> DispatchResult:
    payload = WebhookPayload(
        type='test',
        agent_name=app_settings.agent_name,
        timestamp=utc_iso(local_now()),
    )
    return send_to_webhook(app_settings.webhook_url, payload)
