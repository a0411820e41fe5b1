"""Mail access credential supplied by the calling application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MailCredential(BaseModel):
    """OAuth tokens for the mailbox, owned by the caller.

    Accepts the token dictionary shape emitted by Google's OAuth libraries,
    where ``expiry_date`` is an epoch timestamp in milliseconds.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(min_length=1, description="OAuth access token")
    refresh_token: str | None = Field(default=None, description="OAuth refresh token")
    token_type: str = Field(default="Bearer", description="OAuth token type")
    expiry: datetime | None = Field(default=None, description="Access token expiry (UTC)")

    @model_validator(mode="before")
    @classmethod
    def _convert_expiry_date(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("expiry") is None and data.get("expiry_date") is not None:
            data = dict(data)
            data["expiry"] = datetime.fromtimestamp(int(data.pop("expiry_date")) / 1000, tz=timezone.utc)
        return data
