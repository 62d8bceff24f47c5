"""Errors raised by the Twilio Events API integration."""

import json


class EventsAPIError(Exception):
    """A call to the remote events API failed.

    ``status_code`` is the HTTP status returned by Twilio, or 502 when the
    request never got a usable response.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: int | None = None,
        more_info: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.more_info = more_info

    def __str__(self) -> str:
        if self.code is not None:
            return f"HTTP {self.status_code} ({self.code}): {self.message}"
        return f"HTTP {self.status_code}: {self.message}"


def parse_twilio_error(status_code: int, response_text: str) -> EventsAPIError:
    """Build an EventsAPIError from a Twilio error response.

    Twilio returns JSON like {"code": 20404, "message": "...", "more_info": "...", "status": 404}.
    Falls back to the raw text when the body isn't parseable.
    """
    try:
        body = json.loads(response_text)
    except ValueError:
        return EventsAPIError(status_code, response_text or "Unknown error")

    if not isinstance(body, dict):
        return EventsAPIError(status_code, response_text)

    return EventsAPIError(
        status_code,
        body.get("message") or response_text,
        code=body.get("code"),
        more_info=body.get("more_info"),
    )
