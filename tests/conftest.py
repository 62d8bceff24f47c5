import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from event_relay.config import Settings
from event_relay.dependencies import limiter
from event_relay.main import create_app
from event_relay.providers import TwilioEventsProvider

AUTH_TOKEN = "12345"
PUBLIC_URL = "https://relay.example.com"
EVENT_LOGGER = "tests.event_relay.events"

NOT_FOUND = {
    "code": 20404,
    "message": "The requested resource was not found",
    "more_info": "https://www.twilio.com/docs/errors/20404",
    "status": 404,
}


class FakeTwilioEvents:
    """Canned Twilio Events API responses keyed by (method, path)."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, dict | None]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int = 200, json: dict | None = None):
        self.routes[(method, path)] = (status_code, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json=NOT_FOUND)
        status_code, body = self.routes[key]
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def sink_json(sid: str = "DG00000000000000000000000000000001", **overrides) -> dict:
    data = {
        "sid": sid,
        "account_sid": "ACtest",
        "description": "Event relay webhook sink",
        "sink_type": "webhook",
        "sink_configuration": {"destination": f"{PUBLIC_URL}/webhook-sink", "method": "POST"},
        "status": "initialized",
        "date_created": "2026-10-01T12:30:00Z",
        "date_updated": "2026-10-01T12:30:00Z",
        "url": f"https://events.twilio.com/v1/Sinks/{sid}",
        "links": {"sink_test": f"https://events.twilio.com/v1/Sinks/{sid}/Test"},
    }
    data.update(overrides)
    return data


def subscription_json(sid: str = "DF00000000000000000000000000000001", **overrides) -> dict:
    data = {
        "sid": sid,
        "account_sid": "ACtest",
        "description": "Message delivery",
        "sink_sid": "DG00000000000000000000000000000001",
        "date_created": "2026-10-01T12:35:00Z",
        "date_updated": "2026-10-01T12:35:00Z",
        "url": f"https://events.twilio.com/v1/Subscriptions/{sid}",
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        twilio_account_sid="ACtest",
        twilio_auth_token=AUTH_TOKEN,
        ngrok_url=PUBLIC_URL,
        log_file=str(tmp_path / "logs" / "app.log"),
    )


@pytest.fixture
def twilio_api() -> FakeTwilioEvents:
    return FakeTwilioEvents()


@pytest.fixture
def provider(settings, twilio_api) -> TwilioEventsProvider:
    return TwilioEventsProvider.from_settings(settings, transport=httpx.MockTransport(twilio_api.handler))


@pytest.fixture
def event_logger() -> logging.Logger:
    return logging.getLogger(EVENT_LOGGER)


@pytest.fixture
def app(settings, provider, event_logger):
    return create_app(settings=settings, events_provider=provider, event_logger=event_logger)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
