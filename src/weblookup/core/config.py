"""Configuration management for WebLookup.

This module provides configuration models and loading functionality using Pydantic
for validation and type safety.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DOTENV_LOADED = False

DEFAULT_USER_AGENT = "weblookup/0.1"

ProviderType = Literal["duckduckgo", "google", "mojeek", "searchapi", "tavily"]

_KEYED_PROVIDERS = {"mojeek", "searchapi", "tavily"}


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


def _indexed_dict_to_list(value: Any) -> Any:
    """Convert environment-style ``{"0": ..., "1": ...}`` dicts into ordered lists."""

    if isinstance(value, dict):
        try:
            items = sorted(value.items(), key=lambda item: int(item[0]))
        except ValueError:
            items = sorted(value.items())
        return [entry for _, entry in items]
    return value


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")

    @field_validator("level")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        level = (value or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


class BackoffConfig(BaseModel):
    """Configuration for the per-host rate-limit backoff transport."""

    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries after a 429 response (attempts = max_retries + 1)",
    )
    max_backoff_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Ceiling for the computed exponential delay",
    )


class HttpConfig(BaseModel):
    """Configuration for the shared outbound HTTP client."""

    timeout: float = Field(default=30.0, gt=0.0, description="Request timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header")


class GoogleEngineConfig(BaseModel):
    """One Google Programmable Search engine."""

    api_key: str = Field(..., min_length=1, description="Google API key")
    cx: str = Field(..., min_length=1, description="Search engine identifier")


class ProviderConfig(BaseModel):
    """Configuration for a search provider.

    Attributes:
        provider: Provider type (duckduckgo, google, mojeek, searchapi, tavily)
        enabled: Whether this provider is enabled
        api_key: API key (mojeek, searchapi, tavily)
        engine: Backing engine for SearchApi
        region: Region code for DuckDuckGo (``kl`` parameter)
        engines: Engines for Google Custom Search
    """

    provider: ProviderType = Field(..., description="Provider type")
    enabled: bool = Field(default=True, description="Enable this provider")
    api_key: str | None = Field(default=None, description="API key for the provider")
    engine: str = Field(default="google", description="SearchApi engine")
    region: str | None = Field(default=None, description="DuckDuckGo region")
    engines: list[GoogleEngineConfig] = Field(
        default_factory=list, description="Google Custom Search engines"
    )

    @field_validator("engines", mode="before")
    @classmethod
    def _engines_from_env(cls, value: Any) -> Any:
        return _indexed_dict_to_list(value)

    @model_validator(mode="after")
    def validate_credentials(self) -> ProviderConfig:
        if not self.enabled:
            return self
        if self.provider in _KEYED_PROVIDERS and not (self.api_key or "").strip():
            raise ValueError(f"Provider '{self.provider}' requires an api_key")
        if self.provider == "google" and not self.engines:
            raise ValueError("Provider 'google' requires at least one engine")
        return self


class SearchConfig(BaseModel):
    """Configuration for the search orchestrator."""

    max_results_per_provider: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Results requested from each provider",
    )
    providers: list[ProviderConfig] = Field(
        default_factory=list,
        description="Providers in fan-out order",
    )

    @field_validator("providers", mode="before")
    @classmethod
    def _providers_from_env(cls, value: Any) -> Any:
        return _indexed_dict_to_list(value)


class SitemapConfig(BaseModel):
    """Configuration for sitemap crawling."""

    max_depth: int = Field(default=10, ge=0, description="Maximum sitemap index nesting")


class WebLookupConfig(BaseSettings):
    """Main configuration for WebLookup."""

    model_config = SettingsConfigDict(
        env_prefix="WEBLOOKUP_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    search: SearchConfig = Field(default_factory=SearchConfig, description="Search settings")
    backoff: BackoffConfig = Field(default_factory=BackoffConfig, description="Backoff settings")
    http: HttpConfig = Field(default_factory=HttpConfig, description="HTTP client settings")
    sitemap: SitemapConfig = Field(default_factory=SitemapConfig, description="Sitemap settings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")

    @classmethod
    def from_yaml(cls, path: str | Path) -> WebLookupConfig:
        """Load configuration from a YAML file."""

        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as handle:
            try:
                config_data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file: {exc}") from exc

        if not config_data:
            config_data = {}

        config_data = _expand_env_vars(config_data)
        return cls(**config_data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""

        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as handle:
            yaml.safe_dump(
                self.model_dump(mode="json"),
                handle,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
