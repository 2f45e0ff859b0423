"""
Integration tests for the operation façade as a whole.

Tests cover:
- The post/comment lifecycle scenario
- Fan-out of comment events to independent subscribers
- Atomicity of failed operations
- Live subscriptions consumed by concurrent tasks
"""

import asyncio

import pytest

from blogql_server import ops
from blogql_server.errors import BlogQLError
from blogql_server.ops import (
    CreateCommentInput,
    CreatePostInput,
    CreateUserInput,
    UpdateCommentInput,
    UpdatePostInput,
    UpdateUserInput,
)
from blogql_server.pubsub import MutationKind


def snapshot(ctx):
    return (ops.users(ctx), ops.posts(ctx), ops.comments(ctx))


class TestBlogScenarios:
    """End-to-end flows through the façade."""

    @pytest.fixture
    def ctx(self):
        return ops.Context.create(seed=True)

    @pytest.mark.asyncio
    async def test_post_comment_lifecycle(self, ctx):
        """Create a post, comment on it, delete the post."""
        post = await ops.create_post(
            ctx, CreatePostInput(title="T", body="B", published=True, author="1")
        )
        assert post.id not in {"001", "002", "003"}
        assert post in ops.posts(ctx)

        comment = await ops.create_comment(
            ctx, CreateCommentInput(text="hi", author="1", post=post.id)
        )
        assert comment in ops.comments(ctx)

        await ops.delete_post(ctx, post.id)

        assert post.id not in [p.id for p in ops.posts(ctx)]
        assert comment.id not in [c.id for c in ops.comments(ctx)]

    @pytest.mark.asyncio
    async def test_fan_out_to_independent_subscribers(self, ctx):
        """Two subscribers of one post each see every comment event in order."""
        first = ops.subscribe_comments(ctx, "001")
        second = ops.subscribe_comments(ctx, "001")

        created = await ops.create_comment(ctx, CreateCommentInput(text="a", author="2", post="001"))
        await ops.update_comment(ctx, created.id, UpdateCommentInput(text="b"))
        await ops.delete_comment(ctx, "003")
        await ops.delete_comment(ctx, created.id)

        expected = [
            (MutationKind.CREATED, created.id),
            (MutationKind.UPDATED, created.id),
            (MutationKind.DELETED, "003"),
            (MutationKind.DELETED, created.id),
        ]
        for subscription in (first, second):
            events = subscription.drain()
            assert [(e.mutation_kind, e.data.id) for e in events] == expected
            subscription.cancel()

    @pytest.mark.asyncio
    async def test_concurrent_consumers(self, ctx):
        """Subscribers consuming in their own tasks receive events as published."""
        received = {"a": [], "b": []}
        subscriptions = {name: ops.subscribe_posts(ctx) for name in received}

        async def consume(name):
            async for event in subscriptions[name]:
                received[name].append((event.mutation_kind, event.data.published))
                if len(received[name]) == 2:
                    break

        tasks = [asyncio.create_task(consume(name)) for name in received]

        post = await ops.create_post(
            ctx, CreatePostInput(title="T", body="B", published=True, author="2")
        )
        await ops.update_post(ctx, post.id, UpdatePostInput(published=False))

        await asyncio.wait_for(asyncio.gather(*tasks), timeout=2.0)
        for subscription in subscriptions.values():
            subscription.cancel()

        expected = [(MutationKind.CREATED, True), (MutationKind.DELETED, True)]
        assert received == {"a": expected, "b": expected}
        assert ctx.pubsub.subscriber_count("post") == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation",
        [
            lambda ctx: ops.create_user(ctx, CreateUserInput(name="X", email="info2@infoesque.net")),
            lambda ctx: ops.update_user(ctx, "3", UpdateUserInput(name="M", email="info@infoesque.net")),
            lambda ctx: ops.delete_user(ctx, "missing"),
            lambda ctx: ops.create_post(
                ctx, CreatePostInput(title="T", body="B", published=True, author="missing")
            ),
            lambda ctx: ops.update_post(ctx, "missing", UpdatePostInput(published=True)),
            lambda ctx: ops.delete_post(ctx, "missing"),
            lambda ctx: ops.create_comment(ctx, CreateCommentInput(text="x", author="1", post="003")),
            lambda ctx: ops.update_comment(ctx, "missing", UpdateCommentInput(text="x")),
            lambda ctx: ops.delete_comment(ctx, "missing"),
        ],
    )
    async def test_failed_operations_change_nothing(self, ctx, operation):
        """Every rejected operation leaves all collections as they were."""
        post_events = ops.subscribe_posts(ctx)
        before = snapshot(ctx)

        with pytest.raises(BlogQLError):
            await operation(ctx)

        assert snapshot(ctx) == before
        assert post_events.drain() == []
        post_events.cancel()

    @pytest.mark.asyncio
    async def test_concurrent_mutations_are_serialized(self, ctx):
        """Racing creates with the same email leave exactly one user."""
        results = await asyncio.gather(
            *[
                ops.create_user(ctx, CreateUserInput(name=f"U{i}", email="race@example.com"))
                for i in range(5)
            ],
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        assert len(created) == 1
        assert [u.email for u in ops.users(ctx)].count("race@example.com") == 1
