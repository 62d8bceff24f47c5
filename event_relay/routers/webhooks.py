"""Webhook sink endpoint - receives events delivered by Twilio Event Streams."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from event_relay.auth.twilio import SIGNATURE_HEADER, verify, verify_body
from event_relay.config import Settings
from event_relay.dependencies import get_event_logger, get_settings

router = APIRouter()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class WebhookEnvelope(BaseModel):
    signature_header: str
    request_url: str
    body_fields: dict[str, str | list[str]]


def _form_fields(form) -> dict[str, str | list[str]]:
    """Collapse form items into fields; a repeated name keeps every value."""
    fields: dict[str, str | list[str]] = {}
    for key, value in form.multi_items():
        if not isinstance(value, str):
            continue
        if key not in fields:
            fields[key] = value
        elif isinstance(fields[key], list):
            fields[key].append(value)
        else:
            fields[key] = [fields[key], value]
    return fields


async def _read_payload(request: Request) -> tuple[object, dict[str, str | list[str]]]:
    """Return the parsed body and the fields that take part in the signature.

    Form posts sign every field. A JSON object contributes its top-level
    fields; any other JSON shape (Event Streams delivers arrays) has none.
    Bodies that can't be parsed are returned as text with no fields.
    """
    content_type = request.headers.get("content-type", "")
    body = await request.body()

    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except HTTPException:
            return body.decode("utf-8", errors="replace"), {}
        fields = _form_fields(form)
        return fields, fields

    if not body:
        return None, {}

    try:
        payload = json.loads(body)
    except ValueError:
        return body.decode("utf-8", errors="replace"), {}

    if isinstance(payload, dict):
        fields = {
            key: value if isinstance(value, str) else json.dumps(value, separators=(",", ":"))
            for key, value in payload.items()
        }
        return payload, fields
    return payload, {}


@router.post("/webhook-sink")
async def webhook_sink(
    request: Request,
    settings: Settings = Depends(get_settings),
    logger: logging.Logger = Depends(get_event_logger),
):
    """Log a delivered event. Always acknowledged, even when the signature is invalid."""
    payload, fields = await _read_payload(request)
    envelope = WebhookEnvelope(
        signature_header=request.headers.get(SIGNATURE_HEADER, ""),
        request_url=str(request.url),
        body_fields=fields,
    )

    is_from_twilio = verify(
        settings.twilio_auth_token,
        envelope.request_url,
        envelope.body_fields,
        envelope.signature_header,
    ) and verify_body(envelope.request_url, await request.body())

    if is_from_twilio:
        logger.info("Valid signature. Processing event.")
    else:
        logger.info(
            "Invalid signature. "
            f"Twilio Signature={envelope.signature_header!r} "
            f"Request URI={envelope.request_url} "
            f"Event Data={json.dumps(payload, default=str)}"
        )

    logger.info(f"Event received: {json.dumps(payload, default=str)}")
    logger.info(f"Request headers: {json.dumps(dict(request.headers))}")

    return {"status": "success"}
