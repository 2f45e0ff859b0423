"""
API layer for BlogQL.

This module provides:
- create_schema: Strawberry GraphQL schema over the operation façade
- create_app: FastAPI application serving the schema over HTTP and websockets
"""

from .app import create_app
from .schema import create_schema

__all__ = ["create_app", "create_schema"]
