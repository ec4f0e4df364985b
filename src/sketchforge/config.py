"""Configuration management for Sketchforge.

This module defines the configuration schema using Pydantic settings,
supporting TOML files, environment variables, and programmatic overrides.

Configuration loading priority (highest to lowest):
1. Programmatic overrides (passed to SketchforgeConfig constructor)
2. Environment variables (SKETCHFORGE_* prefix)
3. TOML configuration file
4. Default values defined in this module

Example TOML configuration:
    [model]
    provider = "anthropic"
    max_output_tokens = 4096

Example environment variable override:
    SKETCHFORGE_MODEL__PROVIDER="openai"
    SKETCHFORGE_LOGGING__LEVEL="DEBUG"

API keys are deliberately absent from this schema. They are passed to
``export_with_model`` as explicit credentials.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomli
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

DEFAULT_MODELS: dict[str, str] = {
    "anthropic": "claude-sonnet-4-5",
    "openai": "gpt-4o",
}


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json or console)
        file: Optional log file path (None for stdout only)
        rotation_size_mb: Log file rotation size in megabytes
        retention_count: Number of rotated log files to keep
    """

    model_config = SettingsConfigDict(
        env_prefix="SKETCHFORGE_LOGGING__",
        extra="forbid",
    )

    level: str = Field(default="INFO")
    format: str = Field(default="console")
    file: Path | None = Field(default=None)
    rotation_size_mb: int = Field(default=10, ge=1, le=1000)
    retention_count: int = Field(default=3, ge=1, le=100)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format is recognized."""
        valid_formats = {"json", "console"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return v_lower


class ModelConfig(BaseSettings):
    """Model-augmented generation configuration.

    Attributes:
        provider: Text-generation provider (anthropic or openai)
        model_id: Model identifier; empty selects the provider default
        timeout_seconds: Per-request timeout in seconds
        max_output_tokens: Output budget for a single generation call
        base_url: Optional API base URL override (proxies, compatible gateways)
    """

    model_config = SettingsConfigDict(
        env_prefix="SKETCHFORGE_MODEL__",
        extra="forbid",
    )

    provider: str = Field(default="anthropic")
    model_id: str = Field(default="")
    timeout_seconds: int = Field(default=120, ge=1, le=600)
    max_output_tokens: int = Field(default=4096, ge=256, le=32000)
    base_url: str | None = Field(default=None)

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Validate provider is supported."""
        v_lower = v.lower()
        if v_lower not in DEFAULT_MODELS:
            raise ValueError(
                f"Invalid provider: {v}. Must be one of {set(DEFAULT_MODELS)}"
            )
        return v_lower

    def resolved_model_id(self) -> str:
        """Return the configured model id or the provider default."""
        return self.model_id or DEFAULT_MODELS[self.provider]


class ExportConfig(BaseSettings):
    """Artifact naming and output configuration.

    Attributes:
        output_dir: Directory the CLI writes artifacts into
        rules_filename: Name of the project rules artifact
        protocol_filename: Name of the agent protocol artifact
        specs_dir: Directory prefix for per-component specs
    """

    model_config = SettingsConfigDict(
        env_prefix="SKETCHFORGE_EXPORT__",
        extra="forbid",
    )

    output_dir: Path = Field(default=Path("blueprint"))
    rules_filename: str = Field(default="PROJECT_RULES.md", min_length=1)
    protocol_filename: str = Field(default="AGENT_PROTOCOL.md", min_length=1)
    specs_dir: str = Field(default="specs", min_length=1)


class SketchforgeConfig(BaseSettings):
    """Root configuration for Sketchforge.

    Environment variable format for nested config:
        SKETCHFORGE_<SECTION>__<KEY>=value

    Example:
        SKETCHFORGE_MODEL__TIMEOUT_SECONDS=60
        SKETCHFORGE_EXPORT__SPECS_DIR="docs/specs"
    """

    model_config = SettingsConfigDict(
        env_prefix="SKETCHFORGE_",
        env_nested_delimiter="__",
        extra="forbid",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> SketchforgeConfig:
    """Load configuration from TOML file with environment variable overrides.

    Configuration search order (first found is used):
    1. config_path if explicitly provided
    2. ./sketchforge.toml (current directory)
    3. ~/.config/sketchforge/config.toml (user config directory)

    Args:
        config_path: Explicit path to TOML config file. If None, searches
                    default locations.

    Returns:
        SketchforgeConfig: Fully resolved configuration instance.

    Raises:
        FileNotFoundError: If config_path is explicitly provided but doesn't exist.
        ValueError: If TOML file contains invalid configuration.
    """
    toml_data: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        selected_path: Path | None = config_path
    else:
        search_paths = [
            Path.cwd() / "sketchforge.toml",
            Path.home() / ".config" / "sketchforge" / "config.toml",
        ]
        selected_path = None
        for path in search_paths:
            if path.exists():
                selected_path = path
                break

    if selected_path is not None:
        with open(selected_path, "rb") as f:
            toml_data = tomli.load(f)

    # Constructor arguments outrank the env source, so env values are merged in first
    env_data = EnvSettingsSource(SketchforgeConfig)()
    try:
        return SketchforgeConfig(**_merge(toml_data, env_data))
    except Exception as e:
        if selected_path:
            raise ValueError(
                f"Invalid configuration in {selected_path}: {e}"
            ) from e
        raise ValueError(f"Invalid configuration: {e}") from e
