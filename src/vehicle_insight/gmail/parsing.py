"""Helpers for turning Gmail API messages into internal models."""

from __future__ import annotations

import base64
import binascii
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import structlog

from vehicle_insight.models import RawMessage

logger = structlog.get_logger()

_TEXT_MIME_TYPES = frozenset({"text/plain", "text/html"})


def _header_map(message: dict[str, Any]) -> dict[str, str]:
    payload = message.get("payload") or {}
    headers = payload.get("headers") or []
    result: dict[str, str] = {}
    for h in headers:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first for now.
            result.setdefault(name.lower(), value)
    return result


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
        # "-0000" offsets parse as naive; RFC 5322 defines them as UTC.
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Dates at the edge of the datetime range cannot be shown in local time.
        return parsed.astimezone()
    except (TypeError, ValueError, OverflowError):
        return None


def message_to_raw_message(message: dict[str, Any]) -> RawMessage:
    """Convert a Gmail API message (format=full) to RawMessage.

    Missing headers fall back to the RawMessage sentinels.
    """

    hm = _header_map(message)

    fields: dict[str, Any] = {
        "id": str(message.get("id") or ""),
        "date": _parse_date(hm.get("date")),
        "payload": message.get("payload") or {},
    }
    if hm.get("subject"):
        fields["subject"] = hm["subject"]
    if hm.get("from"):
        fields["sender"] = hm["from"]
    if message.get("snippet"):
        fields["snippet"] = str(message["snippet"])

    return RawMessage(**fields)


def _decode_b64(data: str) -> str:
    # Gmail uses URL-safe base64 and may drop the padding.
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, ValueError) as exc:
        logger.warning("message_body_decode_failed", error=str(exc), length=len(data))
        return ""
    return raw.decode("utf-8", errors="replace")


def _walk_text_parts(parts: list[dict[str, Any]]) -> list[str]:
    texts: list[str] = []
    for part in parts:
        mime = (part.get("mimeType") or "").lower()
        data = (part.get("body") or {}).get("data")
        if mime in _TEXT_MIME_TYPES and data:
            texts.append(_decode_b64(data))
        elif mime.startswith("multipart/"):
            texts.extend(_walk_text_parts(part.get("parts") or []))
    return texts


def decode_message_body(payload: dict[str, Any]) -> str:
    """Return the decoded text of a Gmail message payload.

    A single inline body is decoded as-is. For multipart payloads, every
    text/plain and text/html part is decoded and concatenated in payload
    order; nested multipart containers are walked depth-first. HTML is
    left untouched.

    Args:
        payload: The ``payload`` object of a Gmail message.

    Returns:
        The decoded text, or an empty string if nothing could be decoded.
    """

    body = payload.get("body") or {}
    if body.get("data"):
        return _decode_b64(body["data"])

    return "".join(_walk_text_parts(payload.get("parts") or []))
