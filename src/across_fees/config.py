"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class QuerySettings(BaseSettings):
    """Dune Analytics query service settings."""

    model_config = SettingsConfigDict(env_prefix="DUNE_")

    api_key: SecretStr = SecretStr("")
    base_url: str = "https://api.dune.com/api/v1"
    performance: Literal["medium", "large"] = "medium"
    request_timeout: float = 30.0  # seconds per HTTP call
    poll_interval: float = 2.0  # seconds between execution status polls
    max_polls: int = 300
    transfers_table: str = "dune.risk_labs.result_across_transfers_foundation"


class RunnerSettings(BaseSettings):
    """Daily runner parameters.

    The timeout is caller-level: an abandoned prefetch is reclaimed by the
    query service's own execution timeout, not cancelled upstream.
    """

    model_config = SettingsConfigDict(env_prefix="RUNNER_")

    prefetch_timeout_seconds: float = 900.0


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    query: QuerySettings = QuerySettings()
    runner: RunnerSettings = RunnerSettings()
