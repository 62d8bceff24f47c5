"""Subscription endpoints - bind Twilio event types to a sink."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field, field_validator

from event_relay.config import Settings
from event_relay.dependencies import CREATE_RATE_LIMIT, get_events_provider, get_settings, limiter
from event_relay.providers import BaseEventsProvider
from event_relay.providers.base import SubscriptionRequest, normalize_event_types

router = APIRouter()


class SubscribeRequest(BaseModel):
    description: str = Field(..., min_length=1)
    # One event type name or a list of them, e.g. "com.twilio.messaging.message.delivered"
    type: list[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _wrap_single_type(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


@router.get("/sink/{sid}/subscriptions")
async def list_sink_subscriptions(
    sid: str,
    provider: BaseEventsProvider = Depends(get_events_provider),
    settings: Settings = Depends(get_settings),
):
    """List active subscriptions delivering to a sink (first page only)."""
    subscriptions = await provider.list_subscriptions(page_size=settings.page_size, sink_sid=sid)
    return {"status": "success", "subscriptions": [sub.sid for sub in subscriptions]}


@router.post("/event/subscribe/{sid}")
@limiter.limit(CREATE_RATE_LIMIT)
async def subscribe(
    request: Request,
    sid: str,
    body: SubscribeRequest,
    provider: BaseEventsProvider = Depends(get_events_provider),
):
    """Subscribe the sink identified by ``sid`` to one or more event types."""
    subscription = await provider.create_subscription(
        SubscriptionRequest(
            description=body.description,
            sink_id=sid,
            types=normalize_event_types(body.type),
        )
    )
    return {"status": "success", "subscription": {"subscription-sid": subscription.sid}}


@router.get("/subscription/{sid}")
async def get_subscription(sid: str, provider: BaseEventsProvider = Depends(get_events_provider)):
    subscription = await provider.fetch_subscription(sid)
    return {"status": "success", "subscription": subscription.model_dump(mode="json")}


@router.delete("/subscription/{sid}")
async def delete_subscription(sid: str, provider: BaseEventsProvider = Depends(get_events_provider)):
    deleted = await provider.delete_subscription(sid)
    return {"status": "Subscription was deleted" if deleted else "Subscription was NOT deleted"}
