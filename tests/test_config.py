# ==============================================
# Tests for Configuration
# ==============================================

import pytest

from schema_sampler.config import (
    MongoConfig,
    SamplingConfig,
    get_config,
    parse_query,
    reset_config,
)
from schema_sampler.errors import ConfigError


ENV_VARS = [
    "MONGO_URI", "MONGO_HOST", "MONGO_PORT", "MONGO_USER", "MONGO_PASSWORD",
    "MONGO_DATABASE", "MONGO_COLLECTION", "DEFAULT_SAMPLE_SIZE", "SAMPLE_QUERY",
    "SERVER_SIDE", "GROUP_RESULTS", "VERBOSE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()


class TestGetConfig:

    def test_defaults(self, clean_env):
        config = get_config()
        assert config.mongo.host == "localhost"
        assert config.mongo.port == 27017
        assert config.mongo.collection is None
        assert config.sampling.default_sample_size == 10000
        assert config.sampling.query is None
        assert config.sampling.server_side is False
        assert config.sampling.group_results is True
        assert config.verbose is True

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("MONGO_COLLECTION", "events")
        clean_env.setenv("MONGO_PORT", "27018")
        clean_env.setenv("DEFAULT_SAMPLE_SIZE", "500")
        clean_env.setenv("SAMPLE_QUERY", '{"kind": "click"}')
        clean_env.setenv("SERVER_SIDE", "yes")
        clean_env.setenv("VERBOSE", "false")
        config = get_config()
        assert config.mongo.collection == "events"
        assert config.mongo.port == 27018
        assert config.sampling.default_sample_size == 500
        assert config.sampling.query == {"kind": "click"}
        assert config.sampling.server_side is True
        assert config.verbose is False

    def test_singleton(self, clean_env):
        assert get_config() is get_config()

    @pytest.mark.parametrize("name, value", [
        ("MONGO_PORT", "not-a-port"),
        ("DEFAULT_SAMPLE_SIZE", "0"),
        ("SERVER_SIDE", "maybe"),
        ("SAMPLE_QUERY", "[1, 2]"),
    ])
    def test_invalid_values(self, clean_env, name, value):
        clean_env.setenv(name, value)
        with pytest.raises(ConfigError):
            get_config()


class TestConfigObjects:

    def test_explicit_uri_wins(self):
        config = MongoConfig(uri="mongodb+srv://cluster.example.net", user="u", password="p")
        assert config.connection_uri() == "mongodb+srv://cluster.example.net"

    def test_uri_without_credentials(self):
        assert MongoConfig(database="d").connection_uri() == "mongodb://localhost:27017/d"

    def test_non_positive_sample_size(self):
        with pytest.raises(ConfigError):
            SamplingConfig(default_sample_size=-1)

    def test_parse_query(self):
        assert parse_query(None) is None
        assert parse_query("  ") is None
        assert parse_query('{"a": 1}') == {"a": 1}
        with pytest.raises(ConfigError):
            parse_query("{not json")
