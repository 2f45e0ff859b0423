"""
Unit tests for the in-memory notification bus.

Tests cover:
- Delivery and ordering
- Fan-out to multiple subscribers
- No buffering without subscribers
- Cancellation releasing registrations
"""

import asyncio

import pytest

from blogql_server.pubsub import (
    POST_TOPIC,
    ChangeEvent,
    InMemoryPubSub,
    MutationKind,
    PubSubClosedError,
    comment_topic,
)
from blogql_server.store import Post


def make_event(post_id: str, kind: MutationKind = MutationKind.CREATED) -> ChangeEvent:
    return ChangeEvent(
        kind,
        Post(id=post_id, title="T", body="B", published=True, author="1"),
    )


async def next_event(subscription, timeout: float = 1.0):
    return await asyncio.wait_for(subscription.__anext__(), timeout=timeout)


class TestInMemoryPubSub:
    """Tests for InMemoryPubSub."""

    @pytest.fixture
    def bus(self):
        return InMemoryPubSub()

    def test_comment_topic(self):
        """Comment topics are keyed per post."""
        assert comment_topic("001") == "comment:001"
        assert POST_TOPIC == "post"

    @pytest.mark.asyncio
    async def test_publish_without_subscribers_is_noop(self, bus):
        """Publishing to an empty topic delivers nothing."""
        delivered = await bus.publish(POST_TOPIC, make_event("1"))

        assert delivered == 0
        assert bus.subscriber_count(POST_TOPIC) == 0

    @pytest.mark.asyncio
    async def test_no_replay_for_late_subscribers(self, bus):
        """Events published before subscribing are not delivered."""
        await bus.publish(POST_TOPIC, make_event("early"))

        subscription = bus.subscribe(POST_TOPIC)
        await bus.publish(POST_TOPIC, make_event("late"))

        event = await next_event(subscription)
        assert event.data.id == "late"
        assert subscription.pending == 0
        subscription.cancel()

    @pytest.mark.asyncio
    async def test_events_arrive_in_publish_order(self, bus):
        """A subscriber sees events in publish order."""
        subscription = bus.subscribe(POST_TOPIC)
        for post_id in ("1", "2", "3"):
            await bus.publish(POST_TOPIC, make_event(post_id))

        received = [(await next_event(subscription)).data.id for _ in range(3)]
        assert received == ["1", "2", "3"]
        subscription.cancel()

    @pytest.mark.asyncio
    async def test_fan_out(self, bus):
        """Every subscriber receives every event."""
        topic = comment_topic("001")
        first = bus.subscribe(topic)
        second = bus.subscribe(topic)

        delivered = await bus.publish(topic, make_event("a"))
        await bus.publish(topic, make_event("b", MutationKind.UPDATED))

        assert delivered == 2
        for subscription in (first, second):
            events = [await next_event(subscription), await next_event(subscription)]
            assert [e.data.id for e in events] == ["a", "b"]
            assert [e.mutation_kind for e in events] == [MutationKind.CREATED, MutationKind.UPDATED]
            subscription.cancel()

    @pytest.mark.asyncio
    async def test_topics_are_isolated(self, bus):
        """Subscribers only see their own topic."""
        post_sub = bus.subscribe(POST_TOPIC)
        comment_sub = bus.subscribe(comment_topic("001"))

        await bus.publish(comment_topic("002"), make_event("x"))
        await bus.publish(POST_TOPIC, make_event("y"))

        assert post_sub.pending == 1
        assert comment_sub.pending == 0
        post_sub.cancel()
        comment_sub.cancel()

    @pytest.mark.asyncio
    async def test_cancel_releases_registration(self, bus):
        """A cancelled subscription is unregistered and stops iterating."""
        subscription = bus.subscribe(POST_TOPIC)
        assert bus.subscriber_count(POST_TOPIC) == 1

        subscription.cancel()

        assert not subscription.is_active
        assert bus.subscriber_count(POST_TOPIC) == 0
        assert bus.topics() == []
        assert await bus.publish(POST_TOPIC, make_event("1")) == 0
        with pytest.raises(StopAsyncIteration):
            await next_event(subscription)

    @pytest.mark.asyncio
    async def test_cancel_wakes_waiting_consumer(self, bus):
        """Cancelling ends an `async for` that is waiting for events."""
        subscription = bus.subscribe(POST_TOPIC)
        received = []

        async def consume():
            async for event in subscription:
                received.append(event)

        task = asyncio.create_task(consume())
        await bus.publish(POST_TOPIC, make_event("1"))
        await asyncio.sleep(0)
        subscription.cancel()

        await asyncio.wait_for(task, timeout=1.0)
        assert [e.data.id for e in received] == ["1"]

    @pytest.mark.asyncio
    async def test_task_cancellation_releases_registration(self, bus):
        """Cancelling the consuming task releases the subscription."""

        async def consume():
            async with bus.subscribe(POST_TOPIC) as subscription:
                async for _ in subscription:
                    pass

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        assert bus.subscriber_count(POST_TOPIC) == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert bus.subscriber_count(POST_TOPIC) == 0

    @pytest.mark.asyncio
    async def test_aclose(self, bus):
        """aclose() is the async form of cancel()."""
        subscription = bus.subscribe(POST_TOPIC)
        await subscription.aclose()
        await subscription.aclose()

        assert bus.subscriber_count(POST_TOPIC) == 0

    @pytest.mark.asyncio
    async def test_close_cancels_all(self, bus):
        """Closing the bus ends every subscription and refuses new ones."""
        first = bus.subscribe(POST_TOPIC)
        second = bus.subscribe(comment_topic("001"))

        await bus.close()

        assert bus.is_closed
        assert not first.is_active
        assert not second.is_active
        with pytest.raises(PubSubClosedError):
            bus.subscribe(POST_TOPIC)

    def test_event_to_dict(self):
        """ChangeEvent serializes with mutationKind and data."""
        event = make_event("1", MutationKind.DELETED)

        assert event.to_dict() == {
            "mutationKind": "DELETED",
            "data": {
                "id": "1",
                "title": "T",
                "body": "B",
                "published": True,
                "author": "1",
            },
        }
