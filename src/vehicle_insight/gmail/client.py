"""Gmail API client implementation.

This module provides a client for interacting with the Gmail API using a
credential supplied by the caller.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
from datetime import timezone
from typing import Any, Protocol

import structlog

from vehicle_insight.config import Settings
from vehicle_insight.exceptions import (
    AuthExpiredError,
    AuthenticationError,
    FetchFailure,
    QueryFailure,
)
from vehicle_insight.models import MailCredential

logger = structlog.get_logger()

_AUTH_ERROR_MARKERS = ("invalid_token", "invalid_grant")


class MailBackend(Protocol):
    """The two mailbox operations the pipeline needs."""

    async def list_messages(
        self,
        *,
        query: str | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]: ...

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]: ...


def is_auth_expired(exc: BaseException) -> bool:
    """Return True if `exc` means the backend rejected the credential."""

    from google.auth.exceptions import RefreshError
    from googleapiclient.errors import HttpError

    if isinstance(exc, RefreshError):
        return True
    if isinstance(exc, HttpError) and getattr(exc.resp, "status", None) == 401:
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _AUTH_ERROR_MARKERS)


class GmailClient:
    """Gmail API client for notification searches and message retrieval.

    The client never runs an OAuth flow or touches token files: it is built
    from a `MailCredential` the caller already holds.
    """

    def __init__(self, credential: MailCredential, settings: Settings | None = None) -> None:
        """Initialize Gmail client.

        Args:
            credential: Already-authorized mailbox credential.
            settings: Application settings. If None, uses default settings.
        """
        from vehicle_insight.config import get_settings

        self.settings = settings or get_settings()
        self._credential = credential
        self._service: Any | None = None
        logger.info("gmail_client_initialized")

    async def authenticate(self) -> None:
        """Build the Gmail service from the supplied credential.

        Raises:
            AuthExpiredError: If the credential is rejected while building.
            AuthenticationError: If the service cannot be built otherwise.
        """

        if self._service is not None:
            return

        logger.info("gmail_authentication_started", scope=self.settings.gmail_scope)

        try:
            self._service = await asyncio.to_thread(self._build_service)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            if is_auth_expired(exc):
                raise AuthExpiredError(str(exc)) from exc
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def list_messages(
        self,
        *,
        query: str | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """List messages matching a Gmail search query.

        Args:
            query: Gmail search query string.
            max_results: Maximum number of messages to return.

        Returns:
            List of message id dictionaries.

        Raises:
            AuthExpiredError: If the credential was rejected.
            QueryFailure: If the API request fails otherwise.
        """

        await self._ensure_authenticated()

        logger.info("listing_messages", max_results=max_results or "all", query=query)

        try:
            return await asyncio.to_thread(self._list_messages_sync, max_results, query)
        except Exception as exc:  # noqa: BLE001
            if is_auth_expired(exc):
                logger.warning("gmail_auth_expired", operation="list_messages", error=str(exc))
                raise AuthExpiredError(str(exc)) from exc
            logger.exception("gmail_list_messages_failed", query=query, error=str(exc))
            raise QueryFailure(str(exc)) from exc

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]:
        """Get a specific message by ID.

        Args:
            message_id: The Gmail message ID.
            format: Gmail response format.

        Returns:
            Message data dictionary.

        Raises:
            AuthExpiredError: If the credential was rejected.
            FetchFailure: If the API request fails otherwise.
        """

        await self._ensure_authenticated()

        logger.debug("getting_message", message_id=message_id, format=format)

        try:
            return await asyncio.to_thread(self._get_message_sync, message_id, format)
        except Exception as exc:  # noqa: BLE001
            if is_auth_expired(exc):
                logger.warning("gmail_auth_expired", operation="get_message", error=str(exc))
                raise AuthExpiredError(str(exc)) from exc
            logger.exception("gmail_get_message_failed", message_id=message_id, error=str(exc))
            raise FetchFailure(str(exc)) from exc

    async def _ensure_authenticated(self) -> None:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )

    def _build_service(self) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from google.oauth2.credentials import Credentials
        from googleapiclient.discovery import build

        expiry = self._credential.expiry
        if expiry is not None and expiry.tzinfo is not None:
            # google-auth compares against naive UTC datetimes.
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)

        creds = Credentials(
            token=self._credential.access_token,
            refresh_token=self._credential.refresh_token,
            expiry=expiry,
            scopes=[self.settings.gmail_scope],
        )

        # cache_discovery=False prevents writing discovery docs to disk.
        return build("gmail", "v1", credentials=creds, cache_discovery=False)

    def _list_messages_sync(self, max_results: int | None, query: str | None) -> list[dict[str, Any]]:
        assert self._service is not None
        user_id = self.settings.gmail_user_id
        messages: list[dict[str, Any]] = []

        page_token: str | None = None
        while True:
            if max_results is not None and len(messages) >= max_results:
                break

            remaining = None if max_results is None else max_results - len(messages)
            per_page = 500 if remaining is None else min(500, remaining)

            request = (
                self._service.users()
                .messages()
                .list(userId=user_id, maxResults=per_page, q=query, pageToken=page_token)
            )
            response = request.execute()
            messages.extend(response.get("messages", []) or [])
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return messages if max_results is None else messages[:max_results]

    def _get_message_sync(self, message_id: str, format: str) -> dict[str, Any]:
        assert self._service is not None
        request = (
            self._service.users()
            .messages()
            .get(userId=self.settings.gmail_user_id, id=message_id, format=format)
        )
        return request.execute()
