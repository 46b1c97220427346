"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from ghusage.core.config import AggregationConfig, AppSettings, ParserConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.cache_backend == "memory"


def test_parser_config_defaults():
    config = ParserConfig()
    assert config.chunk_size == 10_000
    assert config.allowed_extensions == [".csv"]


def test_aggregation_config_defaults():
    config = AggregationConfig()
    assert config.max_data_points == 1000
    assert config.top_repositories == 10
    assert config.top_skus == 6


def test_env_override(monkeypatch):
    monkeypatch.setenv("GHUSAGE_AGG_TOP_SKUS", "3")
    monkeypatch.setenv("GHUSAGE_CACHE_BACKEND", "redis")
    assert AggregationConfig().top_skus == 3
    assert AppSettings().cache_backend == "redis"
