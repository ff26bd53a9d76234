"""Configuration management using Pydantic Settings.

This module provides type-safe configuration management with automatic
environment variable loading and validation.

The configuration is organized into logical groups:
- DatabaseConfig: Database connection and pooling settings
- LoggingConfig: Logging levels, files, and debugging options
- CacheConfig: Cache backend selection and per-namespace TTLs
- MusicBrainzConfig: External metadata service endpoint and throttling
- PaginationConfig: Catalog query paging defaults
- APIConfig: HTTP server binding
- SeedConfig: Initial catalog import
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEED_FILE = Path(__file__).resolve().parent.parent / "data" / "records.json"


class DatabaseConfig(BaseModel):
    """Database connection and pooling configuration."""

    url: str = "sqlite+aiosqlite:///data/db/recordstore.db"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("logs/recordstore.log")
    real_time_debug: bool = True


class CacheConfig(BaseModel):
    """Cache backend and TTLs in seconds for each key namespace."""

    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    record_ttl: int = 300  # record:<id> and record:mbid:<id>
    query_ttl: int = 60  # records:<signature>
    musicbrainz_ttl: int = 86400  # musicbrainz:<id>


class MusicBrainzConfig(BaseModel):
    """MusicBrainz web service configuration.

    The service allows one request per second per client, so every uncached
    request waits ``request_delay`` seconds before going out.
    """

    base_url: str = "http://musicbrainz.org/ws/2"
    user_agent: str = "RecordStore/1.0.0 (contact@example.com)"
    request_delay: float = 1.0
    timeout: float = 10.0
    search_limit: int = 10


class PaginationConfig(BaseModel):
    """Catalog query paging defaults."""

    default_limit: int = 20
    max_limit: int = 100


class APIConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    prefix: str = "/api"


class SeedConfig(BaseModel):
    """Initial catalog import configuration."""

    enabled: bool = True
    seed_file: Path = DEFAULT_SEED_FILE


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: DATABASE_URL, REDIS_URL, MUSICBRAINZ_REQUEST_DELAY, PORT
    - Nested: DATABASE__URL, CACHE__REDIS_URL, MUSICBRAINZ__REQUEST_DELAY

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Nested configuration groups
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    cache: CacheConfig = CacheConfig()
    musicbrainz: MusicBrainzConfig = MusicBrainzConfig()
    pagination: PaginationConfig = PaginationConfig()
    api: APIConfig = APIConfig()
    seed: SeedConfig = SeedConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Handles flat env vars (DATABASE_URL, MONGODB_URI) and maps them to the
        nested structure expected by the models (database.url).
        """
        if not isinstance(data, dict):
            return data

        mappings = {
            "database": {
                "database_url": "url",
                "database_echo": "echo",
                "database_pool_size": "pool_size",
            },
            "logging": {
                "console_log_level": "console_level",
                "file_log_level": "file_level",
                "log_file": "log_file",
            },
            "cache": {
                "cache_backend": "backend",
                "redis_url": "redis_url",
            },
            "musicbrainz": {
                "musicbrainz_base_url": "base_url",
                "musicbrainz_user_agent": "user_agent",
                "musicbrainz_request_delay": "request_delay",
            },
            "api": {
                "host": "host",
                "port": "port",
            },
            "seed": {
                "seed_enabled": "enabled",
                "seed_file": "seed_file",
            },
        }

        transformed: dict[str, dict[str, Any]] = {}
        for section, section_map in mappings.items():
            for env_key, field_key in section_map.items():
                if env_key in data:
                    transformed.setdefault(section, {})[field_key] = data.pop(env_key)

        # Merge transformed nested structure back into data
        for section, values in transformed.items():
            existing = data.get(section)
            if isinstance(existing, dict):
                values = {**existing, **values}
            data[section] = values

        return data


# Singleton instance for application use
settings = Settings()

