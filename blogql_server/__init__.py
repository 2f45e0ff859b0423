"""
BlogQL Server - demo GraphQL API over an in-memory blog dataset.

This package serves users, posts and comments through queries, mutations
and subscriptions. The data lives in a single in-memory store:
- Entity store with ordered collections and referential integrity
- Cascade engine for dependent deletes
- Topic-keyed pub/sub for live post and comment updates
- Operation façade that ties validation, mutation and notification together

Architecture:
    ┌─────────────┐     ┌─────────────┐     ┌─────────────────┐
    │   Client    │────▶│  FastAPI +  │────▶│   Operation     │
    │  (GraphQL)  │     │ Strawberry  │     │    Façade       │
    └─────────────┘     └──────▲──────┘     └───┬─────────┬───┘
                               │                │         │
                               │                ▼         ▼
                        ┌──────┴──────┐   ┌─────────┐ ┌─────────┐
                        │Subscriptions│◀──│ Pub/Sub │ │  Entity │
                        │ (websocket) │   │   Bus   │ │  Store  │
                        └─────────────┘   └─────────┘ └─────────┘

Invariants:
    - Ids are unique per entity type and never reused
    - Every failed operation leaves the store unchanged
    - Mutations are serialized by the store lock
    - Subscribers only see events published after they subscribed

How to change safely:
    - Keep transport concerns in api/, never in ops/ or store/
    - New notifications must be published while holding the store lock
    - Extend input dataclasses with UNSET defaults for new optional fields
"""

from ._version import __version__

__all__ = ["__version__"]
