"""Bounded, failure-isolated retrieval of full Gmail messages."""

from __future__ import annotations

import asyncio

import structlog

from vehicle_insight.exceptions import AuthExpiredError, FetchFailure
from vehicle_insight.gmail.client import MailBackend
from vehicle_insight.gmail.parsing import message_to_raw_message
from vehicle_insight.models import RawMessage

logger = structlog.get_logger()


async def fetch_messages(
    client: MailBackend,
    message_ids: list[str],
    *,
    limit: int = 20,
    concurrency: int = 5,
) -> list[RawMessage]:
    """Fetch full content for up to `limit` messages.

    Fetches run concurrently, at most `concurrency` at a time. Results keep
    the order of `message_ids`. A message that fails to fetch or convert is
    logged and left out. AuthExpiredError cancels the fetches still pending
    and is then re-raised.

    Args:
        client: Mail backend to fetch from.
        message_ids: Candidate ids, in priority order.
        limit: Maximum number of ids to fetch.
        concurrency: Maximum fetches in flight.

    Returns:
        The successfully fetched messages.
    """

    selected = message_ids[:limit]
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def fetch_one(message_id: str) -> RawMessage | None:
        async with semaphore:
            try:
                message = await client.get_message(message_id, format="full")
                return message_to_raw_message(message)
            except AuthExpiredError:
                raise
            except FetchFailure as exc:
                logger.warning("message_fetch_failed", message_id=message_id, error=str(exc))
            except Exception as exc:  # noqa: BLE001
                logger.exception("message_conversion_failed", message_id=message_id, error=str(exc))
            return None

    tasks = [asyncio.ensure_future(fetch_one(message_id)) for message_id in selected]
    try:
        results = await asyncio.gather(*tasks)
    except AuthExpiredError:
        # Stop the remaining fetches before the caller sees the error.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    fetched = [message for message in results if message is not None]

    logger.info("messages_fetched", requested=len(selected), fetched=len(fetched))
    return fetched
