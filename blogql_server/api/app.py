"""
HTTP application for BlogQL.

Serves the GraphQL schema through FastAPI:
- POST/GET {graphql_path}: queries and mutations
- WS {graphql_path}: subscriptions (graphql-transport-ws and graphql-ws)
- GET /health: liveness and entity counts

Usage:
    uvicorn --factory blogql_server.api.app:create_app --port 4001
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from .._version import __version__
from ..config import ServerConfig
from ..ops import Context
from .schema import create_schema

logger = logging.getLogger(__name__)


def create_app(config: ServerConfig | None = None, context: Context | None = None) -> FastAPI:
    """Create the BlogQL FastAPI app.

    Args:
        config: Server configuration (loaded from env if not provided)
        context: Operation context (a fresh one, seeded per config, if not provided)

    Returns:
        FastAPI application with the GraphQL router mounted
    """
    config = config or ServerConfig.from_env()
    if context is None:
        context = Context.create(seed=config.store.seed_demo_data)

    async def get_context() -> dict[str, Any]:
        return {"operations": context, "demo_user_id": config.store.demo_user_id}

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "BlogQL server started",
            extra={"graphql_path": config.graphql.path, **context.store.counts()},
        )
        yield
        await context.pubsub.close()
        logger.info("BlogQL server stopped")

    app = FastAPI(
        title="BlogQL Server",
        description="Users, posts and comments over GraphQL, backed by an in-memory store.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.http.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    graphql_router = GraphQLRouter(
        create_schema(),
        context_getter=get_context,
        graphql_ide="graphiql" if config.graphql.graphiql_enabled else None,
        subscription_protocols=(GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL),
    )
    app.include_router(graphql_router, prefix=config.graphql.path)
    app.state.context = context

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "service": "blogql-server",
            "version": __version__,
            "counts": context.store.counts(),
        }

    return app

