"""Event Relay - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from event_relay import __version__
from event_relay.config import Settings, settings as default_settings
from event_relay.dependencies import limiter, verify_api_key
from event_relay.errors import EventsAPIError
from event_relay.event_log import configure_event_logger
from event_relay.providers import BaseEventsProvider, TwilioEventsProvider
from event_relay.routers import health, sinks, subscriptions, webhooks

logger = logging.getLogger(__name__)


async def events_api_error_handler(request: Request, exc: EventsAPIError) -> JSONResponse:
    # Client errors from Twilio pass through; everything else is a bad gateway
    status_code = exc.status_code if 400 <= exc.status_code < 500 else 502
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "code": exc.code, "message": exc.message},
    )


def create_app(
    settings: Settings | None = None,
    events_provider: BaseEventsProvider | None = None,
    event_logger: logging.Logger | None = None,
) -> FastAPI:
    """Build the relay. The events provider and event logger are created once here."""
    settings = settings or default_settings

    if events_provider is None and settings.twilio_configured:
        events_provider = TwilioEventsProvider.from_settings(settings)
    if events_provider is None:
        logger.warning("TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN not set; sink and subscription routes disabled")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if app.state.events_provider is not None:
            await app.state.events_provider.aclose()

    app = FastAPI(
        title="Event Relay",
        description="Twilio Event Streams sink/subscription gateway and webhook receiver",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.events_provider = events_provider
    app.state.event_logger = event_logger or configure_event_logger(settings)

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(EventsAPIError, events_api_error_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers (health and the webhook sink are public; others require API key when API_KEY is set)
    app.include_router(health.router)
    app.include_router(webhooks.router, tags=["webhooks"])
    app.include_router(sinks.router, tags=["sinks"], dependencies=[Depends(verify_api_key)])
    app.include_router(
        subscriptions.router, tags=["subscriptions"], dependencies=[Depends(verify_api_key)]
    )

    return app


app = create_app()
