"""Build email records from parsed notifications and summarize them."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from vehicle_insight.config import Settings
from vehicle_insight.models import EmailRecord, EmailStats, EmailStatus, RawMessage, VehicleInfo
from vehicle_insight.models.email_record import VIN_NOT_FOUND


def build_email_record(
    message: RawMessage,
    vehicle_info: VehicleInfo,
    content: str,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> EmailRecord:
    """Combine a fetched message and its vehicle fields into an EmailRecord.

    The receipt time comes from the Date header; messages without a usable
    header are stamped with `now` (default: the current time).
    """

    from vehicle_insight.config import get_settings

    settings = settings or get_settings()
    received_at = message.date or now or datetime.now(timezone.utc)
    local = received_at.astimezone()

    return EmailRecord(
        id=message.id,
        subject=message.subject,
        sender=message.sender,
        received_at=received_at,
        date_display=local.strftime(settings.date_format),
        time_display=local.strftime(settings.time_format),
        snippet=message.snippet,
        vin=vehicle_info.vin or VIN_NOT_FOUND,
        vehicle=vehicle_info.vehicle,
        plate=vehicle_info.plate,
        state=vehicle_info.state,
        status=EmailStatus.NEW,
        raw_content=content,
    )


def sort_records(records: Sequence[EmailRecord]) -> list[EmailRecord]:
    """Newest first; records with equal timestamps keep their fetch order."""

    return sorted(records, key=lambda record: record.received_at, reverse=True)


def compute_stats(emails: Sequence[EmailRecord], *, now: datetime | None = None) -> EmailStats:
    """Count new, total and today's records.

    "Today" is the local calendar date of `now` (default: the current time).
    """

    today = (now or datetime.now(timezone.utc)).astimezone().date()
    return EmailStats(
        new_count=sum(1 for email in emails if email.status == EmailStatus.NEW),
        total_count=len(emails),
        today_count=sum(1 for email in emails if email.received_at.astimezone().date() == today),
    )
