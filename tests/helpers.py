"""Shared builders for Gmail API payloads and an in-memory mailbox."""

from __future__ import annotations

import base64
from typing import Any

from vehicle_insight.exceptions import FetchFailure

NOTIFICATION_SUBJECT = "DRN Buy It Now Hit - VIN: 1HGCM82633A123456"

NOTIFICATION_HTML = """
<html><body>
<table>
  <tr><td>Vehicle&nbsp;Year</td><td>2007</td></tr>
  <tr><td>Vehicle Make</td><td>Chevrolet</td></tr>
  <tr><td>Vehicle Model</td><td>Tahoe</td></tr>
  <tr><td>Vehicle Color</td><td>Gray</td></tr>
  <tr><td>Plate ID</td><td>ABC123</td></tr>
  <tr><td>State ID</td><td>tx</td></tr>
</table>
</body></html>
"""


def encode_body(text: str) -> str:
    """Encode text the way Gmail does: URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_gmail_message(
    message_id: str,
    *,
    subject: str | None = NOTIFICATION_SUBJECT,
    sender: str | None = "DRN <BuyItNow@digitalrecognition.net>",
    date: str | None = "Mon, 02 Jun 2025 08:30:00 +0000",
    body: str | None = NOTIFICATION_HTML,
    snippet: str | None = "Buy It Now Hit",
) -> dict[str, Any]:
    """Build a Gmail API message (format=full) with a single inline body."""
    headers = []
    if subject is not None:
        headers.append({"name": "Subject", "value": subject})
    if sender is not None:
        headers.append({"name": "From", "value": sender})
    if date is not None:
        headers.append({"name": "Date", "value": date})

    payload: dict[str, Any] = {"mimeType": "text/html", "headers": headers, "body": {}}
    if body is not None:
        payload["body"] = {"data": encode_body(body), "size": len(body)}

    message: dict[str, Any] = {"id": message_id, "threadId": f"t-{message_id}", "payload": payload}
    if snippet is not None:
        message["snippet"] = snippet
    return message


class FakeMailbox:
    """In-memory MailBackend.

    `search_results` maps a query to the ids it returns, or to an exception
    instance to raise. `messages` maps ids to Gmail message dicts, or to an
    exception instance to raise on fetch.
    """

    def __init__(
        self,
        search_results: dict[str, Any] | None = None,
        messages: dict[str, Any] | None = None,
    ) -> None:
        self.search_results = search_results or {}
        self.messages = messages or {}
        self.queries: list[tuple[str | None, int | None]] = []
        self.fetched: list[str] = []

    async def list_messages(
        self,
        *,
        query: str | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        self.queries.append((query, max_results))
        result = self.search_results.get(query, [])
        if isinstance(result, Exception):
            raise result
        ids = list(result)
        if max_results is not None:
            ids = ids[:max_results]
        return [{"id": message_id, "threadId": f"t-{message_id}"} for message_id in ids]

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]:
        self.fetched.append(message_id)
        message = self.messages.get(message_id)
        if message is None:
            raise FetchFailure(f"Requested entity was not found: {message_id}")
        if isinstance(message, Exception):
            raise message
        return message

