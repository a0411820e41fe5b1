"""Notification search: query planning and candidate collection."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from vehicle_insight.config import Settings
from vehicle_insight.exceptions import AuthExpiredError, QueryFailure
from vehicle_insight.gmail.client import MailBackend

logger = structlog.get_logger()


def build_search_queries(settings: Settings | None = None) -> list[str]:
    """Return the notification search queries, broadest first."""

    from vehicle_insight.config import get_settings

    settings = settings or get_settings()
    sender = f"from:{settings.notification_sender}"
    return [
        sender,
        f"{sender} {settings.domain_keyword}",
        f'{sender} "{settings.notification_phrase}"',
        f"{sender} {settings.field_keyword}",
    ]


def merge_candidate_ids(result_sets: Iterable[Iterable[str]]) -> list[str]:
    """Union id lists, keeping first-seen order and dropping repeats."""

    merged: dict[str, None] = {}
    for ids in result_sets:
        for message_id in ids:
            merged.setdefault(message_id, None)
    return list(merged)


async def search_candidate_ids(
    client: MailBackend,
    queries: list[str],
    *,
    page_size: int = 50,
) -> list[str]:
    """Run the queries in order and collect unique candidate message ids.

    If the first (broadest) query returns anything, its results are used
    as-is and the narrower queries are skipped. This assumes the broad
    results are a superset of the narrow ones, which does not hold when the
    broad query is truncated at ``page_size``.

    A failing query is logged and skipped. AuthExpiredError propagates.
    """

    collected: list[list[str]] = []

    for index, query in enumerate(queries):
        try:
            messages = await client.list_messages(query=query, max_results=page_size)
        except AuthExpiredError:
            raise
        except QueryFailure as exc:
            logger.warning("search_query_failed", query=query, error=str(exc))
            continue
        except Exception as exc:  # noqa: BLE001
            logger.exception("search_query_failed", query=query, error=str(exc))
            continue

        ids = [m["id"] for m in messages if isinstance(m.get("id"), str) and m["id"]]
        logger.info("search_query_completed", query=query, message_count=len(ids))
        if not ids:
            continue

        collected.append(ids)
        if index == 0:
            logger.info("search_broad_query_used", message_count=len(ids))
            break

    candidates = merge_candidate_ids(collected)
    logger.info("search_completed", candidate_count=len(candidates), query_count=len(queries))
    return candidates
