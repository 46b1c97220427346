"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class ParserConfig(BaseSettings):
    """CSV upload and parsing configuration."""

    model_config = {"env_prefix": "GHUSAGE_PARSER_"}

    chunk_size: int = 10_000  # lines per progress report
    allowed_extensions: list[str] = [".csv"]
    encoding: str = "utf-8-sig"  # tolerates a leading BOM


class AggregationConfig(BaseSettings):
    """Aggregation defaults for chart series."""

    model_config = {"env_prefix": "GHUSAGE_AGG_"}

    max_data_points: int = 1000
    top_repositories: int = 10
    top_organizations: int = 10
    top_skus: int = 6
    recent_days: int | None = 30
    cache_ttl: int = 300


class RedisConfig(BaseSettings):
    """Redis memo cache configuration."""

    model_config = {"env_prefix": "GHUSAGE_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    decode_responses: bool = True


class S3Config(BaseSettings):
    """S3 export source configuration."""

    model_config = {"env_prefix": "GHUSAGE_S3_"}

    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "GHUSAGE_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    cache_backend: Literal["memory", "redis"] = "memory"

    parser: ParserConfig = ParserConfig()
    aggregation: AggregationConfig = AggregationConfig()
    redis: RedisConfig = RedisConfig()
    s3: S3Config = S3Config()
