"""Unit tests for message fetching."""

import asyncio

import pytest

from helpers import FakeMailbox, make_gmail_message
from vehicle_insight.exceptions import AuthExpiredError, FetchFailure
from vehicle_insight.gmail.fetch import fetch_messages


@pytest.mark.asyncio
async def test_fetch_keeps_candidate_order() -> None:
    ids = ["c", "a", "b"]
    mailbox = FakeMailbox(messages={i: make_gmail_message(i) for i in ids})

    messages = await fetch_messages(mailbox, ids)

    assert [m.id for m in messages] == ["c", "a", "b"]


@pytest.mark.asyncio
async def test_fetch_is_capped_at_limit() -> None:
    ids = [str(i) for i in range(30)]
    mailbox = FakeMailbox(messages={i: make_gmail_message(i) for i in ids})

    messages = await fetch_messages(mailbox, ids, limit=20)

    assert [m.id for m in messages] == ids[:20]
    assert sorted(mailbox.fetched, key=int) == [str(i) for i in range(20)]


@pytest.mark.asyncio
async def test_failed_fetch_is_dropped() -> None:
    mailbox = FakeMailbox(
        messages={
            "1": make_gmail_message("1"),
            "2": FetchFailure("Backend Error"),
            "3": make_gmail_message("3"),
        }
    )

    messages = await fetch_messages(mailbox, ["1", "2", "3", "missing"])

    assert [m.id for m in messages] == ["1", "3"]


@pytest.mark.asyncio
async def test_malformed_message_is_dropped() -> None:
    mailbox = FakeMailbox(
        messages={"1": {"id": "1", "payload": {"headers": "not-a-list"}}, "2": make_gmail_message("2")}
    )

    messages = await fetch_messages(mailbox, ["1", "2"])

    assert [m.id for m in messages] == ["2"]


@pytest.mark.asyncio
async def test_auth_expired_aborts_fetch() -> None:
    mailbox = FakeMailbox(messages={"1": make_gmail_message("1"), "2": AuthExpiredError("401")})

    with pytest.raises(AuthExpiredError):
        await fetch_messages(mailbox, ["1", "2"])


@pytest.mark.asyncio
async def test_concurrency_is_bounded() -> None:
    in_flight = 0
    peak = 0

    class SlowMailbox(FakeMailbox):
        async def get_message(self, message_id, *, format="full"):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return await super().get_message(message_id, format=format)

    ids = [str(i) for i in range(12)]
    mailbox = SlowMailbox(messages={i: make_gmail_message(i) for i in ids})

    messages = await fetch_messages(mailbox, ids, concurrency=3)

    assert len(messages) == 12
    assert peak == 3


@pytest.mark.asyncio
async def test_auth_expired_cancels_pending_fetches() -> None:
    completed: list[str] = []

    class SlowMailbox(FakeMailbox):
        async def get_message(self, message_id, *, format="full"):
            if message_id != "bad":
                await asyncio.sleep(0.2)
            message = await super().get_message(message_id, format=format)
            completed.append(message_id)
            return message

    mailbox = SlowMailbox(
        messages={
            "slow1": make_gmail_message("slow1"),
            "bad": AuthExpiredError("401"),
            "slow2": make_gmail_message("slow2"),
        }
    )

    with pytest.raises(AuthExpiredError):
        await fetch_messages(mailbox, ["slow1", "bad", "slow2"])
    await asyncio.sleep(0.3)

    assert completed == []
