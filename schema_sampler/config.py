# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     uri: str | None        (default None, overrides host/port/credentials)
#     host: str              (default "localhost")
#     port: int              (default 27017)
#     user: str | None       (default None)
#     password: str | None   (default None)
#     database: str          (default "test")
#     collection: str | None (default None, required to run)
#
# - SamplingConfig (dataclass)
#     default_sample_size: int   (default 10000)
#     query: dict | None         (default None, filter applied before sampling)
#     server_side: bool          (default False, delegate stages to MongoDB)
#     group_results: bool        (default True, single-record server output)
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     sampling: SamplingConfig
#     verbose: bool              (default True)
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from schema_sampler.config import get_config
#   config = get_config()
#   print(config.mongo.collection)
#   print(config.sampling.default_sample_size)
#
# ==============================================

import os
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path

from dotenv import load_dotenv

from schema_sampler.errors import ConfigError


DEFAULT_SAMPLE_SIZE = 10000

_TRUE_VARIANTS = {"1", "true", "yes", "on"}
_FALSE_VARIANTS = {"0", "false", "no", "off", ""}


@dataclass
class MongoConfig:
    """MongoDB connection configuration."""
    uri: Optional[str] = None
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "test"
    collection: Optional[str] = None

    def connection_uri(self) -> str:
        """Build the connection string, preferring an explicit URI."""
        if self.uri:
            return self.uri
        if self.user and self.password:
            return f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
        return f"mongodb://{self.host}:{self.port}/{self.database}"


@dataclass
class SamplingConfig:
    """How many documents to look at and where the aggregation runs."""
    default_sample_size: int = DEFAULT_SAMPLE_SIZE
    query: Optional[Dict[str, Any]] = None
    server_side: bool = False
    group_results: bool = True

    def __post_init__(self):
        if self.default_sample_size <= 0:
            raise ConfigError(
                f"default_sample_size must be positive, got {self.default_sample_size}"
            )


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    verbose: bool = True


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VARIANTS:
        return True
    if value in _FALSE_VARIANTS:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def parse_query(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON filter document.

    Args:
        raw: JSON text such as '{"status": "active"}', or None/empty

    Returns:
        The filter as a dict, or None when nothing was given

    Raises:
        ConfigError: If the text is not a JSON object
    """
    if raw is None or not raw.strip():
        return None
    try:
        query = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"query is not valid JSON: {e}") from e
    if not isinstance(query, dict):
        raise ConfigError("query must be a JSON object")
    return query


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.
    
    Returns:
        AppConfig: Application configuration
    """
    global _config_instance
    
    if _config_instance is not None:
        return _config_instance
    
    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)
    
    # Build MongoDB configuration
    mongo_config = MongoConfig(
        uri=os.getenv("MONGO_URI") or None,
        host=os.getenv("MONGO_HOST", "localhost"),
        port=_int_env("MONGO_PORT", 27017),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "test"),
        collection=os.getenv("MONGO_COLLECTION") or None
    )
    
    # Build sampling configuration
    sampling_config = SamplingConfig(
        default_sample_size=_int_env("DEFAULT_SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE),
        query=parse_query(os.getenv("SAMPLE_QUERY")),
        server_side=_bool_env("SERVER_SIDE", False),
        group_results=_bool_env("GROUP_RESULTS", True)
    )
    
    # Build main application configuration
    _config_instance = AppConfig(
        mongo=mongo_config,
        sampling=sampling_config,
        verbose=_bool_env("VERBOSE", True)
    )
    
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() reloads."""
    global _config_instance
    _config_instance = None
