"""Base provider interface for event stream clients."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict

DEFAULT_SCHEMA_VERSION = "1"


class EventTypeSpec(BaseModel):
    """One event type to subscribe to, pinned to a schema version."""
    model_config = ConfigDict(frozen=True)

    type: str
    schema_version: str = DEFAULT_SCHEMA_VERSION


class SubscriptionRequest(BaseModel):
    description: str
    sink_id: str
    types: list[EventTypeSpec]


class SinkConfiguration(BaseModel):
    """Webhook sink configuration."""
    destination: str
    method: str = "POST"
    batch_events: bool | None = None


class Sink(BaseModel):
    """Sink resource as returned by the provider. Unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    sid: str
    status: str | None = None
    description: str | None = None
    sink_type: str | None = None
    sink_configuration: dict | None = None
    date_created: datetime | None = None
    date_updated: datetime | None = None
    url: str | None = None


class Subscription(BaseModel):
    """Subscription resource as returned by the provider. Unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    sid: str
    description: str | None = None
    sink_sid: str | None = None
    date_created: datetime | None = None
    date_updated: datetime | None = None
    url: str | None = None


def normalize_event_types(event_types: str | Sequence[str] | None) -> list[EventTypeSpec]:
    """Build the subscription ``types`` payload from one or more event type names.

    Order is preserved and duplicates are passed through. A missing value
    yields an empty list.
    """
    if event_types is None:
        return []
    if isinstance(event_types, str):
        event_types = [event_types]
    return [EventTypeSpec(type=name) for name in event_types]


class BaseEventsProvider(ABC):
    """Abstract base class for event stream providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider identifier."""
        pass

    @abstractmethod
    async def list_sinks(self, page_size: int) -> list[Sink]:
        pass

    @abstractmethod
    async def create_sink(self, description: str, configuration: SinkConfiguration, sink_type: str = "webhook") -> Sink:
        pass

    @abstractmethod
    async def fetch_sink(self, sid: str) -> Sink:
        pass

    @abstractmethod
    async def delete_sink(self, sid: str) -> bool:
        """Delete a sink. Returns whether the provider confirmed the deletion."""
        pass

    @abstractmethod
    async def list_subscriptions(self, page_size: int, sink_sid: str | None = None) -> list[Subscription]:
        pass

    @abstractmethod
    async def create_subscription(self, request: SubscriptionRequest) -> Subscription:
        pass

    @abstractmethod
    async def fetch_subscription(self, sid: str) -> Subscription:
        pass

    @abstractmethod
    async def delete_subscription(self, sid: str) -> bool:
        pass

    async def aclose(self) -> None:
        """Release any held connections."""
        pass
