"""FastAPI dependencies shared across routers."""

import logging
import secrets

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader
from slowapi import Limiter
from slowapi.util import get_remote_address

from event_relay.config import Settings
from event_relay.providers import BaseEventsProvider

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# Applied to routes that create remote resources
limiter = Limiter(key_func=get_remote_address)
CREATE_RATE_LIMIT = "30/minute"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_events_provider(request: Request) -> BaseEventsProvider:
    provider = request.app.state.events_provider
    if provider is None:
        raise HTTPException(503, "Twilio credentials not configured")
    return provider


def get_event_logger(request: Request) -> logging.Logger:
    return request.app.state.event_logger


async def verify_api_key(request: Request, api_key: str | None = Security(api_key_header)):
    """Require X-API-Key when API_KEY is configured."""
    expected = request.app.state.settings.api_key
    if not expected:
        return
    if not api_key or not secrets.compare_digest(api_key, expected):
        raise HTTPException(401, "Invalid or missing API key")
