"""Twilio request signature validation.

Twilio signs every webhook it sends with the account auth token:
HMAC-SHA1 over the full request URL followed by the POST fields sorted by
name (each as ``name + value``), base64-encoded into ``X-Twilio-Signature``.
"""

import base64
import hashlib
import hmac
from collections.abc import Mapping, Sequence
from urllib.parse import parse_qs, urlsplit, urlunsplit

SIGNATURE_HEADER = "X-Twilio-Signature"

DEFAULT_PORTS = {"https": 443, "http": 80}


def compute_signature(
    auth_token: str,
    request_url: str,
    post_fields: Mapping[str, str | Sequence[str]] | None = None,
) -> str:
    """Return the base64 HMAC-SHA1 signature Twilio would send for this request.

    A repeated parameter (list value) contributes each distinct value, sorted.
    """
    message = request_url
    if post_fields:
        for key in sorted(post_fields):
            value = post_fields[key]
            values = sorted(set(value)) if isinstance(value, (list, tuple)) else [value]
            for item in values:
                message += f"{key}{item}"

    digest = hmac.new(auth_token.encode("utf-8"), message.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def compute_body_hash(body: bytes) -> str:
    return hashlib.sha256(body).hexdigest()


def _port_variants(request_url: str) -> list[str]:
    """The URL as given, plus the same URL with its default port added or removed."""
    variants = [request_url]
    parts = urlsplit(request_url)
    default_port = DEFAULT_PORTS.get(parts.scheme)
    if default_port is None or not parts.hostname:
        return variants

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    userinfo = parts.netloc.rpartition("@")[0]
    prefix = f"{userinfo}@" if userinfo else ""

    if parts.port is None:
        netloc = f"{prefix}{host}:{default_port}"
    elif parts.port == default_port:
        netloc = f"{prefix}{host}"
    else:
        return variants

    variants.append(urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment)))
    return variants


def _body_sha256_param(request_url: str) -> str | None:
    values = parse_qs(urlsplit(request_url).query).get("bodySHA256")
    return values[0] if values else None


def verify(
    auth_token: str,
    request_url: str,
    post_fields: Mapping[str, str | Sequence[str]] | None,
    signature_header: str | None,
) -> bool:
    """Check ``signature_header`` against the request. Never raises.

    When the URL carries a ``bodySHA256`` parameter (JSON bodies) the fields
    are not part of the signature; check the body with ``verify_body``.
    """
    if not auth_token or not request_url or not signature_header:
        return False

    try:
        fields = {} if _body_sha256_param(request_url) else dict(post_fields or {})
        for url in _port_variants(request_url):
            expected = compute_signature(auth_token, url, fields)
            if hmac.compare_digest(expected.encode("ascii"), signature_header.encode("utf-8")):
                return True
    except (TypeError, ValueError, AttributeError):
        return False

    return False


def verify_body(request_url: str, body: bytes) -> bool:
    """Check the raw body against the URL's ``bodySHA256`` parameter, if any."""
    expected = _body_sha256_param(request_url)
    if expected is None:
        return True
    return hmac.compare_digest(compute_body_hash(body), expected)
