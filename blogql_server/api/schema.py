"""
GraphQL schema for BlogQL.

This module binds the operation façade to a Strawberry schema:
- Query: users, me, post, posts, comments
- Mutation: create/update/delete for users, posts and comments
- Subscription: post, comment(postId)

Resolvers only translate between GraphQL types and façade types; every
rule lives in blogql_server.ops.

Invariants:
    - The GraphQL context is a dict holding the façade Context under
      "operations" and the current user id under "demo_user_id"
    - BlogQLError codes are reported in error extensions on every
      transport, through BlogQLError.extensions
    - A subscription's registration is released when the client goes away

How to change safely:
    - Add new fields to the façade first, then expose them here
    - Keep input conversion explicit: UNSET and null are distinct for age
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any, Optional

import strawberry
from graphql import GraphQLError
from strawberry.types import ExecutionContext, Info

from .. import ops
from ..errors import BlogQLError
from ..pubsub import ChangeEvent, MutationKind
from ..store import Comment, Post, User

logger = logging.getLogger(__name__)

MutationType = strawberry.enum(MutationKind, name="MutationType")


def _context(info: Info) -> ops.Context:
    return info.context["operations"]


def _present(value: Any) -> Any:
    """Map an omitted or null GraphQL argument to an absent update field."""
    if value is strawberry.UNSET or value is None:
        return ops.UNSET
    return value


# =============================================================================
# Object types
# =============================================================================


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    name: str
    email: str
    age: Optional[int] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserType":
        return cls(id=strawberry.ID(user.id), name=user.name, email=user.email, age=user.age)

    @strawberry.field
    def posts(self, info: Info) -> list["PostType"]:
        return [PostType.from_entity(p) for p in ops.user_posts(_context(info), self.id)]

    @strawberry.field
    def comments(self, info: Info) -> list["CommentType"]:
        return [CommentType.from_entity(c) for c in ops.user_comments(_context(info), self.id)]


@strawberry.type(name="Post")
class PostType:
    id: strawberry.ID
    title: str
    body: str
    published: bool
    entity: strawberry.Private[Post]

    @classmethod
    def from_entity(cls, post: Post) -> "PostType":
        return cls(
            id=strawberry.ID(post.id),
            title=post.title,
            body=post.body,
            published=post.published,
            entity=post,
        )

    @strawberry.field
    def author(self, info: Info) -> UserType:
        return UserType.from_entity(ops.post_author(_context(info), self.entity))

    @strawberry.field
    def comments(self, info: Info) -> list["CommentType"]:
        return [CommentType.from_entity(c) for c in ops.post_comments(_context(info), self.id)]


@strawberry.type(name="Comment")
class CommentType:
    id: strawberry.ID
    text: str
    entity: strawberry.Private[Comment]

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentType":
        return cls(id=strawberry.ID(comment.id), text=comment.text, entity=comment)

    @strawberry.field
    def author(self, info: Info) -> UserType:
        return UserType.from_entity(ops.comment_author(_context(info), self.entity))

    @strawberry.field
    def post(self, info: Info) -> PostType:
        return PostType.from_entity(ops.comment_post(_context(info), self.entity))


@strawberry.type
class PostSubscriptionPayload:
    mutation: MutationType
    data: PostType

    @classmethod
    def from_event(cls, event: ChangeEvent[Post]) -> "PostSubscriptionPayload":
        return cls(mutation=event.mutation_kind, data=PostType.from_entity(event.data))


@strawberry.type
class CommentSubscriptionPayload:
    mutation: MutationType
    data: CommentType

    @classmethod
    def from_event(cls, event: ChangeEvent[Comment]) -> "CommentSubscriptionPayload":
        return cls(mutation=event.mutation_kind, data=CommentType.from_entity(event.data))


# =============================================================================
# Input types
# =============================================================================


@strawberry.input
class CreateUserInput:
    name: str
    email: str
    age: Optional[int] = None


@strawberry.input
class UpdateUserInput:
    name: Optional[str] = strawberry.UNSET
    email: Optional[str] = strawberry.UNSET
    age: Optional[int] = strawberry.UNSET

    def to_input(self) -> ops.UpdateUserInput:
        # An explicit null age clears it; null name/email are ignored
        age = ops.UNSET if self.age is strawberry.UNSET else self.age
        return ops.UpdateUserInput(name=_present(self.name), email=_present(self.email), age=age)


@strawberry.input
class CreatePostInput:
    title: str
    body: str
    published: bool
    author: strawberry.ID


@strawberry.input
class UpdatePostInput:
    title: Optional[str] = strawberry.UNSET
    body: Optional[str] = strawberry.UNSET
    published: Optional[bool] = strawberry.UNSET

    def to_input(self) -> ops.UpdatePostInput:
        return ops.UpdatePostInput(
            title=_present(self.title),
            body=_present(self.body),
            published=_present(self.published),
        )


@strawberry.input
class CreateCommentInput:
    text: str
    author: strawberry.ID
    post: strawberry.ID


@strawberry.input
class UpdateCommentInput:
    text: Optional[str] = strawberry.UNSET

    def to_input(self) -> ops.UpdateCommentInput:
        return ops.UpdateCommentInput(text=_present(self.text))


# =============================================================================
# Root types
# =============================================================================


@strawberry.type
class Query:
    @strawberry.field
    def users(self, info: Info, query: Optional[str] = None) -> list[UserType]:
        return [UserType.from_entity(u) for u in ops.users(_context(info), query)]

    @strawberry.field
    def me(self, info: Info) -> UserType:
        return UserType.from_entity(ops.me(_context(info), info.context["demo_user_id"]))

    @strawberry.field
    def post(self, info: Info, id: strawberry.ID) -> PostType:
        return PostType.from_entity(ops.post(_context(info), id))

    @strawberry.field
    def posts(self, info: Info, query: Optional[str] = None) -> list[PostType]:
        return [PostType.from_entity(p) for p in ops.posts(_context(info), query)]

    @strawberry.field
    def comments(self, info: Info) -> list[CommentType]:
        return [CommentType.from_entity(c) for c in ops.comments(_context(info))]


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(self, info: Info, data: CreateUserInput) -> UserType:
        user = await ops.create_user(
            _context(info),
            ops.CreateUserInput(name=data.name, email=data.email, age=data.age),
        )
        return UserType.from_entity(user)

    @strawberry.mutation
    async def delete_user(self, info: Info, id: strawberry.ID) -> UserType:
        return UserType.from_entity(await ops.delete_user(_context(info), id))

    @strawberry.mutation
    async def update_user(self, info: Info, id: strawberry.ID, data: UpdateUserInput) -> UserType:
        return UserType.from_entity(await ops.update_user(_context(info), id, data.to_input()))

    @strawberry.mutation
    async def create_post(self, info: Info, data: CreatePostInput) -> PostType:
        post = await ops.create_post(
            _context(info),
            ops.CreatePostInput(
                title=data.title,
                body=data.body,
                published=data.published,
                author=data.author,
            ),
        )
        return PostType.from_entity(post)

    @strawberry.mutation
    async def delete_post(self, info: Info, id: strawberry.ID) -> PostType:
        return PostType.from_entity(await ops.delete_post(_context(info), id))

    @strawberry.mutation
    async def update_post(self, info: Info, id: strawberry.ID, data: UpdatePostInput) -> PostType:
        return PostType.from_entity(await ops.update_post(_context(info), id, data.to_input()))

    @strawberry.mutation
    async def create_comment(self, info: Info, data: CreateCommentInput) -> CommentType:
        comment = await ops.create_comment(
            _context(info),
            ops.CreateCommentInput(text=data.text, author=data.author, post=data.post),
        )
        return CommentType.from_entity(comment)

    @strawberry.mutation
    async def delete_comment(self, info: Info, id: strawberry.ID) -> CommentType:
        return CommentType.from_entity(await ops.delete_comment(_context(info), id))

    @strawberry.mutation
    async def update_comment(
        self, info: Info, id: strawberry.ID, data: UpdateCommentInput
    ) -> CommentType:
        return CommentType.from_entity(
            await ops.update_comment(_context(info), id, data.to_input())
        )


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def post(self, info: Info) -> AsyncGenerator[PostSubscriptionPayload, None]:
        subscription = ops.subscribe_posts(_context(info))
        try:
            async for event in subscription:
                yield PostSubscriptionPayload.from_event(event)
        finally:
            subscription.cancel()

    @strawberry.subscription
    async def comment(
        self, info: Info, post_id: strawberry.ID
    ) -> AsyncGenerator[CommentSubscriptionPayload, None]:
        subscription = ops.subscribe_comments(_context(info), post_id)
        try:
            async for event in subscription:
                yield CommentSubscriptionPayload.from_event(event)
        finally:
            subscription.cancel()


# =============================================================================
# Schema
# =============================================================================


class BlogQLSchema(strawberry.Schema):
    """Schema that logs rejected operations quietly.

    BlogQLErrors are expected caller mistakes and are logged at INFO;
    anything else goes through Strawberry's error logging.
    """

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: Optional[ExecutionContext] = None,
    ) -> None:
        unexpected = []
        for error in errors:
            if isinstance(error.original_error, BlogQLError):
                logger.info(
                    "Operation rejected",
                    extra={"code": error.original_error.code, "error": error.message},
                )
            else:
                unexpected.append(error)
        if unexpected:
            super().process_errors(unexpected, execution_context)


def create_schema() -> BlogQLSchema:
    """Build the BlogQL GraphQL schema."""
    return BlogQLSchema(
        query=Query,
        mutation=Mutation,
        subscription=Subscription,
    )
