"""Subject-line gate for notification emails."""

from __future__ import annotations

from vehicle_insight.config import Settings


def is_notification_subject(subject: str, settings: Settings | None = None) -> bool:
    """Return True if `subject` looks like a genuine hit notification.

    The lower-cased subject must contain the sender brand keyword, the
    notification phrase and the VIN field keyword.
    """

    from vehicle_insight.config import get_settings

    settings = settings or get_settings()
    lowered = (subject or "").lower()
    required = (settings.domain_keyword, settings.notification_phrase, settings.field_keyword)
    return all(term.lower() in lowered for term in required)
