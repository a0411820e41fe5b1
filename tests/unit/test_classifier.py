"""Unit tests for the notification subject classifier."""

import pytest

from vehicle_insight.extraction import is_notification_subject


@pytest.mark.parametrize(
    "subject",
    [
        "DRN Buy It Now Hit - VIN: 1HGCM82633A123456",
        "drn buy it now hit vin",
        "Fwd: [DRN] BUY IT NOW HIT for VIN 1HGCM82633A123456",
    ],
)
def test_accepts_notification_subjects(subject, mock_settings) -> None:
    assert is_notification_subject(subject, mock_settings) is True


@pytest.mark.parametrize(
    "subject",
    [
        "Buy It Now Hit - VIN: 1HGCM82633A123456",
        "DRN Hit - VIN: 1HGCM82633A123456",
        "DRN Buy It Now Hit - plate ABC123",
        "Weekly DRN newsletter",
        "",
    ],
)
def test_rejects_subjects_missing_a_required_term(subject, mock_settings) -> None:
    assert is_notification_subject(subject, mock_settings) is False


def test_uses_default_settings() -> None:
    assert is_notification_subject("DRN Buy It Now Hit - VIN: 1HGCM82633A123456") is True
