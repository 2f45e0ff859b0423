"""
Configuration management for BlogQL Server.

All configuration is done via environment variables - no config files.
This module provides typed configuration classes with validation.

Invariants:
    - All settings have sensible defaults for local development
    - Configuration objects are immutable once loaded

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
    - Keep from_env() and the dataclass defaults in sync
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class HttpConfig:
    """HTTP server configuration.

    Attributes:
        host: Address to bind
        port: Port to bind
        cors_origins: Origins allowed by the CORS middleware
    """

    host: str = "0.0.0.0"
    port: int = 4001
    cors_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> HttpConfig:
        """Load configuration from environment variables."""
        origins = os.getenv("HTTP_CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("HTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("HTTP_PORT", "4001")),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


@dataclass(frozen=True)
class GraphQLConfig:
    """GraphQL endpoint configuration.

    Attributes:
        path: URL path of the GraphQL endpoint
        graphiql_enabled: Whether to serve the GraphiQL IDE on GET
    """

    path: str = "/graphql"
    graphiql_enabled: bool = True

    @classmethod
    def from_env(cls) -> GraphQLConfig:
        """Load configuration from environment variables."""
        return cls(
            path=os.getenv("GRAPHQL_PATH", "/graphql"),
            graphiql_enabled=os.getenv("GRAPHIQL_ENABLED", "true").lower() == "true",
        )


@dataclass(frozen=True)
class StoreConfig:
    """In-memory store configuration.

    Attributes:
        seed_demo_data: Load the demo users, posts and comments at startup
        demo_user_id: User returned by the `me` query
    """

    seed_demo_data: bool = True
    demo_user_id: str = "1"

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Load configuration from environment variables."""
        return cls(
            seed_demo_data=os.getenv("SEED_DEMO_DATA", "true").lower() == "true",
            demo_user_id=os.getenv("DEMO_USER_ID", "1"),
        )


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
        )


@dataclass
class ServerConfig:
    """Complete server configuration.

    Attributes:
        http: HTTP server configuration
        graphql: GraphQL endpoint configuration
        store: In-memory store configuration
        observability: Logging configuration
    """

    http: HttpConfig = field(default_factory=HttpConfig)
    graphql: GraphQLConfig = field(default_factory=GraphQLConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Load complete configuration from environment variables.

        Returns:
            ServerConfig with all sections populated from environment.

        Raises:
            ValueError: If configuration is invalid.
        """
        config = cls(
            http=HttpConfig.from_env(),
            graphql=GraphQLConfig.from_env(),
            store=StoreConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if not 0 < self.http.port < 65536:
            raise ValueError(f"HTTP_PORT must be between 1 and 65535, got {self.http.port}")
        if not self.graphql.path.startswith("/"):
            raise ValueError(f"GRAPHQL_PATH must start with '/', got '{self.graphql.path}'")
        if not self.store.demo_user_id:
            raise ValueError("DEMO_USER_ID must not be empty")
        if self.observability.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid LOG_FORMAT '{self.observability.log_format}'. "
                f"Must be one of: {', '.join(LOG_FORMATS)}"
            )

    def log_config(self) -> None:
        """Log the loaded configuration."""
        logger.info(
            "Server configuration loaded",
            extra={
                "http_bind": f"{self.http.host}:{self.http.port}",
                "graphql_path": self.graphql.path,
                "graphiql_enabled": self.graphql.graphiql_enabled,
                "seed_demo_data": self.store.seed_demo_data,
                "demo_user_id": self.store.demo_user_id,
                "log_level": self.observability.log_level,
            },
        )
