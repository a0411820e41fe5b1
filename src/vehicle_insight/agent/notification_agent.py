"""Notification ingestion agent.

This module provides the pipeline that turns a mailbox into vehicle
records: search, fetch, classify, decode, extract and assemble.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from vehicle_insight.agent.assembler import build_email_record, sort_records
from vehicle_insight.config import Settings
from vehicle_insight.extraction import is_notification_subject, parse_vehicle_info
from vehicle_insight.gmail.client import GmailClient, MailBackend
from vehicle_insight.gmail.fetch import fetch_messages
from vehicle_insight.gmail.parsing import decode_message_body
from vehicle_insight.gmail.search import build_search_queries, search_candidate_ids
from vehicle_insight.models import EmailRecord, MailCredential

logger = structlog.get_logger()


class NotificationAgent:
    """Runs one stateless pass over the mailbox.

    Every call to `run` queries the mailbox again; nothing is cached
    between runs.
    """

    def __init__(self, client: MailBackend, settings: Settings | None = None) -> None:
        """Initialize the agent.

        Args:
            client: Authenticated mail backend.
            settings: Application settings. If None, uses default settings.
        """
        from vehicle_insight.config import get_settings

        self.settings = settings or get_settings()
        self.client = client
        logger.info("notification_agent_initialized")

    async def run(self) -> list[EmailRecord]:
        """Fetch notification emails and parse them into records.

        Returns:
            Records sorted newest first. Empty if nothing was found or every
            query failed.

        Raises:
            AuthExpiredError: If the mail backend rejected the credential.
        """

        settings = self.settings
        queries = build_search_queries(settings)
        candidate_ids = await search_candidate_ids(
            self.client, queries, page_size=settings.search_page_size
        )
        if not candidate_ids:
            logger.info("no_notification_candidates")
            return []

        messages = await fetch_messages(
            self.client,
            candidate_ids,
            limit=settings.max_messages,
            concurrency=settings.fetch_concurrency,
        )

        now = datetime.now(timezone.utc)
        records: list[EmailRecord] = []
        for message in messages:
            if not is_notification_subject(message.subject, settings):
                logger.debug("message_skipped_not_notification", message_id=message.id)
                continue

            try:
                content = decode_message_body(message.payload)
                vehicle_info = parse_vehicle_info(content, message.subject, settings=settings)
                record = build_email_record(
                    message, vehicle_info, content, settings=settings, now=now
                )
            except Exception as exc:  # noqa: BLE001
                logger.exception("message_processing_failed", message_id=message.id, error=str(exc))
                continue
            records.append(record)

        logger.info(
            "notification_emails_processed",
            candidates=len(candidate_ids),
            fetched=len(messages),
            records=len(records),
        )
        return sort_records(records)


async def fetch_notification_emails(
    credential: MailCredential,
    *,
    settings: Settings | None = None,
    client: MailBackend | None = None,
) -> list[EmailRecord]:
    """Run the notification pipeline for a caller-supplied credential.

    Args:
        credential: Mailbox credential owned by the caller.
        settings: Application settings. If None, uses default settings.
        client: Mail backend to use instead of building a GmailClient.

    Returns:
        Records sorted newest first.

    Raises:
        AuthExpiredError: If the mail backend rejected the credential.
    """

    if client is None:
        gmail = GmailClient(credential, settings)
        await gmail.authenticate()
        client = gmail

    return await NotificationAgent(client, settings).run()
