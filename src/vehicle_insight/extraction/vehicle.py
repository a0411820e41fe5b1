"""Vehicle field extraction from notification emails.

Notifications arrive as loosely formatted HTML tables, so extraction works
on a flattened copy of the body and tries progressively looser patterns:

1. VIN from the subject line, then labeled VINs in the body, then any
   bare 17-character VIN run.
2. Each table field (plate, state, make, model, year, color) from its own
   ordered pattern list.
3. A positional "year make model [color]" match when the table fields are
   incomplete.

Missing fields are reported as empty values, never as errors.
"""

from __future__ import annotations

import re

import structlog

from vehicle_insight.config import Settings
from vehicle_insight.extraction.patterns import (
    BARE_VIN_PATTERNS,
    CONTENT_VIN_PATTERNS,
    FIELD_PATTERNS,
    SUBJECT_VIN_PATTERNS,
    VEHICLE_FALLBACK_PATTERNS,
    PatternMatcher,
    field_patterns,
    first_match,
)
from vehicle_insight.models import UNKNOWN_VEHICLE, VehicleInfo

logger = structlog.get_logger()

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_content(content: str) -> str:
    """Flatten an email body: drop tags, turn &nbsp; into spaces, squeeze whitespace."""

    text = _TAG_RE.sub(" ", content or "")
    text = text.replace("&nbsp;", " ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_vin(cleaned: str, subject: str) -> str | None:
    """Return the VIN, preferring the subject line over the body."""

    for matchers, source in (
        (SUBJECT_VIN_PATTERNS, subject or ""),
        (CONTENT_VIN_PATTERNS, cleaned),
        (BARE_VIN_PATTERNS, cleaned),
    ):
        vin = first_match(matchers, source)
        if vin is not None:
            return vin.upper()
    return None


def extract_fields(
    cleaned: str,
    patterns: dict[str, tuple[PatternMatcher, ...]] = FIELD_PATTERNS,
) -> dict[str, str]:
    """Return every table field that one of its patterns could find."""

    fields: dict[str, str] = {}
    for name, matchers in patterns.items():
        value = first_match(matchers, cleaned)
        if value is not None:
            fields[name] = value
    return fields


def build_vehicle_description(fields: dict[str, str], cleaned: str) -> str:
    year = fields.get("vehicle_year")
    make = fields.get("vehicle_make")
    model = fields.get("vehicle_model")
    if year and make and model:
        parts = [year, make, model]
        if fields.get("vehicle_color"):
            parts.append(fields["vehicle_color"])
        return " ".join(parts)

    # No year range check: any four digits followed by words qualify.
    for pattern in VEHICLE_FALLBACK_PATTERNS:
        match = pattern.search(cleaned)
        if match:
            return " ".join(group for group in match.groups() if group)
    return UNKNOWN_VEHICLE


def parse_vehicle_info(
    content: str, subject: str, settings: Settings | None = None
) -> VehicleInfo:
    """Extract vehicle information from a notification.

    Args:
        content: Decoded message body (HTML or plain text).
        subject: Message subject line.
        settings: Supplies the brand keyword that ends a model name. If None,
            uses default settings.

    Returns:
        VehicleInfo: The extracted fields; absent values stay at their defaults.
    """

    from vehicle_insight.config import get_settings

    settings = settings or get_settings()
    cleaned = clean_content(content)
    vin = extract_vin(cleaned, subject)
    fields = extract_fields(cleaned, field_patterns(settings.domain_keyword))
    vehicle = build_vehicle_description(fields, cleaned)

    info = VehicleInfo(
        vin=vin,
        vehicle=vehicle,
        plate=fields.get("plate_id", ""),
        state=fields.get("state_id", "").upper(),
    )

    logger.debug(
        "vehicle_info_parsed",
        content_length=len(cleaned),
        vin_found=vin is not None,
        fields_found=sorted(fields),
        vehicle=info.vehicle,
    )
    return info
