"""Twilio Event Streams API provider."""

import json
import logging

import httpx

from event_relay.config import Settings
from event_relay.errors import EventsAPIError, parse_twilio_error
from .base import (
    BaseEventsProvider,
    Sink,
    SinkConfiguration,
    Subscription,
    SubscriptionRequest,
)


logger = logging.getLogger(__name__)


class TwilioEventsProvider(BaseEventsProvider):
    """Twilio Events v1 client (sinks and subscriptions)."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        base_url: str = "https://events.twilio.com/v1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=(account_sid, auth_token),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "TwilioEventsProvider":
        return cls(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            base_url=settings.twilio_events_api_url,
            timeout=settings.http_timeout,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "twilio"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Twilio Events request {method} {path} failed: {e}")
            raise EventsAPIError(502, f"Twilio Events API unreachable: {e}") from e

        if response.status_code >= 400:
            error = parse_twilio_error(response.status_code, response.text)
            logger.warning(f"Twilio Events {method} {path} returned {error}")
            raise error

        return response

    async def list_sinks(self, page_size: int = 20) -> list[Sink]:
        response = await self._request("GET", "/Sinks", params={"PageSize": page_size})
        return [Sink(**item) for item in response.json().get("sinks", [])]

    async def create_sink(self, description: str, configuration: SinkConfiguration, sink_type: str = "webhook") -> Sink:
        data = {
            "Description": description,
            "SinkConfiguration": configuration.model_dump_json(exclude_none=True),
            "SinkType": sink_type,
        }
        response = await self._request("POST", "/Sinks", data=data)
        sink = Sink(**response.json())
        logger.info(f"Created {sink_type} sink {sink.sid} -> {configuration.destination}")
        return sink

    async def fetch_sink(self, sid: str) -> Sink:
        response = await self._request("GET", f"/Sinks/{sid}")
        return Sink(**response.json())

    async def delete_sink(self, sid: str) -> bool:
        response = await self._request("DELETE", f"/Sinks/{sid}")
        return response.status_code == 204

    async def list_subscriptions(self, page_size: int = 20, sink_sid: str | None = None) -> list[Subscription]:
        params: dict = {"PageSize": page_size}
        if sink_sid:
            params["SinkSid"] = sink_sid
        response = await self._request("GET", "/Subscriptions", params=params)
        return [Subscription(**item) for item in response.json().get("subscriptions", [])]

    async def create_subscription(self, request: SubscriptionRequest) -> Subscription:
        # Types is a repeated form field; each entry is a JSON object
        data = {
            "Description": request.description,
            "SinkSid": request.sink_id,
            "Types": [json.dumps(spec.model_dump()) for spec in request.types],
        }
        response = await self._request("POST", "/Subscriptions", data=data)
        subscription = Subscription(**response.json())
        logger.info(f"Created subscription {subscription.sid} on sink {request.sink_id}")
        return subscription

    async def fetch_subscription(self, sid: str) -> Subscription:
        response = await self._request("GET", f"/Subscriptions/{sid}")
        return Subscription(**response.json())

    async def delete_subscription(self, sid: str) -> bool:
        response = await self._request("DELETE", f"/Subscriptions/{sid}")
        return response.status_code == 204

    async def aclose(self) -> None:
        await self._client.aclose()
