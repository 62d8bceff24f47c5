"""Sink endpoints - Twilio Event Streams sink resources."""

from email.utils import format_datetime

from fastapi import APIRouter, Depends, HTTPException, Request

from event_relay.config import Settings
from event_relay.dependencies import CREATE_RATE_LIMIT, get_events_provider, get_settings, limiter
from event_relay.providers import BaseEventsProvider
from event_relay.providers.base import SinkConfiguration

router = APIRouter()

WEBHOOK_SINK_PATH = "/webhook-sink"


@router.get("/sinks")
async def list_sinks(
    provider: BaseEventsProvider = Depends(get_events_provider),
    settings: Settings = Depends(get_settings),
):
    """List sinks on the account (first page only)."""
    sinks = await provider.list_sinks(page_size=settings.page_size)
    return {"status": "success", "sinks": [sink.sid for sink in sinks]}


@router.get("/sink/{sid}")
async def get_sink(sid: str, provider: BaseEventsProvider = Depends(get_events_provider)):
    sink = await provider.fetch_sink(sid)
    return {"status": "success", "sink": sink.model_dump(mode="json")}


@router.get("/create-sink")
@limiter.limit(CREATE_RATE_LIMIT)
async def create_sink(
    request: Request,
    provider: BaseEventsProvider = Depends(get_events_provider),
    settings: Settings = Depends(get_settings),
):
    """Create a webhook sink that delivers events to this relay's /webhook-sink route."""
    if not settings.ngrok_url:
        raise HTTPException(503, "Public base URL not configured (NGROK_URL)")

    configuration = SinkConfiguration(
        destination=f"{settings.ngrok_url.rstrip('/')}{WEBHOOK_SINK_PATH}",
        method="POST",
    )
    sink = await provider.create_sink(settings.twilio_sink_description, configuration, "webhook")

    return {
        "created": format_datetime(sink.date_created) if sink.date_created else None,
        "sid": sink.sid,
        "status": sink.status,
    }


@router.delete("/sink/{sid}")
async def delete_sink(sid: str, provider: BaseEventsProvider = Depends(get_events_provider)):
    deleted = await provider.delete_sink(sid)
    return {"status": "Sink was deleted" if deleted else "Sink was NOT deleted"}
