"""Data models for Vehicle Insight.

This module contains Pydantic models for data validation and serialization.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from vehicle_insight.models.credential import MailCredential
from vehicle_insight.models.email_record import EmailRecord, EmailStatus

UNKNOWN_VEHICLE = "Unknown"


class VehicleInfo(BaseModel):
    """Vehicle fields extracted from a single notification email."""

    model_config = ConfigDict(frozen=True)

    vin: Optional[str] = Field(default=None, description="17-character VIN if found")
    vehicle: str = Field(default=UNKNOWN_VEHICLE, description="Year/make/model/color description")
    plate: str = Field(default="", description="License plate, empty if not found")
    state: str = Field(default="", description="Two-letter plate state, empty if not found")


class RawMessage(BaseModel):
    """A fetched Gmail message reduced to the parts the pipeline reads."""

    id: str = Field(description="Gmail message ID")
    subject: str = Field(default="No Subject", description="Subject header")
    sender: str = Field(default="Unknown Sender", description="Raw From header")
    date: datetime | None = Field(default=None, description="Parsed Date header")
    snippet: str = Field(default="No preview", description="Gmail snippet")
    payload: dict[str, Any] = Field(default_factory=dict, description="Gmail payload structure")


class EmailStats(BaseModel):
    """Summary counts over a collection of email records."""

    new_count: int = Field(ge=0, description="Records with status NEW")
    total_count: int = Field(ge=0, description="Number of records")
    today_count: int = Field(ge=0, description="Records received on the current local date")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def processed_count(self) -> int:
        return self.total_count - self.new_count


__all__ = [
    "EmailRecord",
    "EmailStats",
    "EmailStatus",
    "MailCredential",
    "RawMessage",
    "UNKNOWN_VEHICLE",
    "VehicleInfo",
]
