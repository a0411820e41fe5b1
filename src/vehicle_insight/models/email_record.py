"""Structured record for a single vehicle hit notification.

Records are rebuilt from the mailbox on every run. The ``status`` field always
starts as NEW; tracking which hits have been handled belongs to the caller.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

VIN_NOT_FOUND = "VIN not found"


class EmailStatus(str, Enum):
    """Handling status of a notification."""

    NEW = "NEW"
    PROCESSED = "PROCESSED"


class EmailRecord(BaseModel):
    """A notification email joined with the vehicle fields parsed from it."""

    id: str = Field(description="Gmail message ID")
    subject: str = Field(description="Subject header")
    sender: str = Field(description="Raw From header")
    received_at: datetime = Field(description="Receipt timestamp (Date header or processing time)")
    date_display: str = Field(description="Receipt date rendered in local time")
    time_display: str = Field(description="Receipt time rendered in local time")
    snippet: str = Field(description="Gmail snippet")

    vin: str = Field(default=VIN_NOT_FOUND, description="VIN or the not-found sentinel")
    vehicle: str = Field(default="Unknown", description="Vehicle description")
    plate: str = Field(default="", description="License plate")
    state: str = Field(default="", description="Plate state")

    status: EmailStatus = Field(default=EmailStatus.NEW, description="Handling status")
    raw_content: str = Field(default="", description="Decoded message body")
