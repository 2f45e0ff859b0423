"""
Unit tests for configuration loading.
"""

import pytest

from blogql_server.config import (
    GraphQLConfig,
    HttpConfig,
    ObservabilityConfig,
    ServerConfig,
    StoreConfig,
)


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        """Defaults are suitable for local development."""
        config = ServerConfig()
        config.validate()

        assert config.http.port == 4001
        assert config.graphql.path == "/graphql"
        assert config.store.seed_demo_data is True
        assert config.store.demo_user_id == "1"
        assert config.observability.log_format == "text"

    def test_from_env(self, monkeypatch):
        """Every section reads its environment variables."""
        monkeypatch.setenv("HTTP_HOST", "127.0.0.1")
        monkeypatch.setenv("HTTP_PORT", "8000")
        monkeypatch.setenv("HTTP_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("GRAPHQL_PATH", "/api/graphql")
        monkeypatch.setenv("GRAPHIQL_ENABLED", "false")
        monkeypatch.setenv("SEED_DEMO_DATA", "false")
        monkeypatch.setenv("DEMO_USER_ID", "2")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FORMAT", "JSON")

        config = ServerConfig.from_env()

        assert config.http == HttpConfig(
            host="127.0.0.1", port=8000, cors_origins=("http://a.test", "http://b.test")
        )
        assert config.graphql == GraphQLConfig(path="/api/graphql", graphiql_enabled=False)
        assert config.store == StoreConfig(seed_demo_data=False, demo_user_id="2")
        assert config.observability == ObservabilityConfig(log_level="DEBUG", log_format="json")

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValueError, match="LOG_FORMAT"):
            ServerConfig.from_env()

    def test_invalid_port(self):
        config = ServerConfig(http=HttpConfig(port=0))

        with pytest.raises(ValueError, match="HTTP_PORT"):
            config.validate()

    def test_invalid_graphql_path(self):
        config = ServerConfig(graphql=GraphQLConfig(path="graphql"))

        with pytest.raises(ValueError, match="GRAPHQL_PATH"):
            config.validate()

    def test_config_is_immutable(self):
        """Section configs are frozen."""
        config = HttpConfig()

        with pytest.raises(AttributeError):
            config.port = 1
