from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from event_relay import __version__
from event_relay.config import Settings
from event_relay.dependencies import get_settings


router = APIRouter(tags=["health"])

_startup_time = datetime.now(timezone.utc)


class EndpointInfo(BaseModel):
    path: str
    description: str
    provider: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    endpoints: list[EndpointInfo]


class IntegrationStatus(BaseModel):
    connected: bool
    status: str
    last_check: str | None = None


class IntegrationsResponse(BaseModel):
    twilio_events: IntegrationStatus
    public_callback: IntegrationStatus


ENDPOINTS = [
    EndpointInfo(path="/health", description="Relay status and API directory"),
    EndpointInfo(path="/health/integrations", description="Integration configuration status"),
    EndpointInfo(path="/sinks", description="List sinks", provider="Twilio Event Streams"),
    EndpointInfo(path="/sink/{sid}", description="Fetch or delete a sink", provider="Twilio Event Streams"),
    EndpointInfo(path="/create-sink", description="Create a webhook sink for this relay", provider="Twilio Event Streams"),
    EndpointInfo(path="/sink/{sid}/subscriptions", description="List a sink's subscriptions", provider="Twilio Event Streams"),
    EndpointInfo(path="/event/subscribe/{sid}", description="Subscribe a sink to event types", provider="Twilio Event Streams"),
    EndpointInfo(path="/subscription/{sid}", description="Fetch or delete a subscription", provider="Twilio Event Streams"),
    EndpointInfo(path="/webhook-sink", description="Inbound event delivery (signature checked, logged)"),
]


def _check_twilio(settings: Settings) -> IntegrationStatus:
    if not settings.twilio_configured:
        return IntegrationStatus(connected=False, status="credentials not configured")
    return IntegrationStatus(
        connected=True,
        status="ok",
        last_check=datetime.now(timezone.utc).isoformat(),
    )


def _check_public_callback(settings: Settings) -> IntegrationStatus:
    if not settings.ngrok_url:
        return IntegrationStatus(connected=False, status="public base URL not configured")
    return IntegrationStatus(connected=True, status=f"ok ({settings.ngrok_url.rstrip('/')}/webhook-sink)")


@router.get("/health", response_model=HealthResponse)
async def health_check():
    uptime = (datetime.now(timezone.utc) - _startup_time).total_seconds()

    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(uptime, 2),
        endpoints=ENDPOINTS,
    )


@router.get("/health/integrations", response_model=IntegrationsResponse)
async def get_integrations(settings: Settings = Depends(get_settings)):
    return IntegrationsResponse(
        twilio_events=_check_twilio(settings),
        public_callback=_check_public_callback(settings),
    )
