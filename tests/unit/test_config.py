"""Unit tests for configuration management.

Tests cover:
- Default configuration values
- TOML file loading
- Environment variable overrides
- Validation errors for invalid configurations
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sketchforge.config import (
    DEFAULT_MODELS,
    ExportConfig,
    LoggingConfig,
    ModelConfig,
    SketchforgeConfig,
    load_config,
)


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with no config file in reach and no SKETCHFORGE_ variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("SKETCHFORGE_MODEL__PROVIDER", "SKETCHFORGE_LOGGING__LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestModelConfig:
    """Test ModelConfig defaults and validation."""

    def test_default_values(self) -> None:
        config = ModelConfig()
        assert config.provider == "anthropic"
        assert config.model_id == ""
        assert config.timeout_seconds == 120
        assert config.max_output_tokens == 4096
        assert config.base_url is None

    def test_provider_case_insensitive(self) -> None:
        assert ModelConfig(provider="OpenAI").provider == "openai"

    def test_unknown_provider_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid provider"):
            ModelConfig(provider="acme")

    def test_timeout_validation(self) -> None:
        with pytest.raises(ValidationError):
            ModelConfig(timeout_seconds=0)
        with pytest.raises(ValidationError):
            ModelConfig(timeout_seconds=601)

    def test_resolved_model_id(self) -> None:
        assert ModelConfig().resolved_model_id() == DEFAULT_MODELS["anthropic"]
        assert ModelConfig(provider="openai").resolved_model_id() == DEFAULT_MODELS["openai"]
        assert ModelConfig(model_id="custom-model").resolved_model_id() == "custom-model"


class TestExportConfig:
    """Test ExportConfig defaults and validation."""

    def test_default_values(self) -> None:
        config = ExportConfig()
        assert config.output_dir == Path("blueprint")
        assert config.rules_filename == "PROJECT_RULES.md"
        assert config.protocol_filename == "AGENT_PROTOCOL.md"
        assert config.specs_dir == "specs"

    def test_empty_names_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExportConfig(specs_dir="")


class TestLoggingConfig:
    """Test LoggingConfig defaults."""

    def test_default_values(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == "console"
        assert config.file is None


class TestSketchforgeConfig:
    """Test root configuration."""

    def test_extra_sections_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            SketchforgeConfig(database={"url": "sqlite://"})

    def test_nested_override(self) -> None:
        config = SketchforgeConfig(model={"provider": "openai", "timeout_seconds": 30})
        assert config.model.provider == "openai"
        assert config.model.timeout_seconds == 30
        assert config.export.specs_dir == "specs"


class TestLoadConfig:
    """Test load_config file discovery and overrides."""

    def test_load_defaults_when_no_file(self, isolated: Path) -> None:
        config = load_config()
        assert config.model.provider == "anthropic"
        assert config.export.output_dir == Path("blueprint")

    def test_explicit_path_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_load_from_toml_file(self, isolated: Path) -> None:
        config_file = isolated / "custom.toml"
        config_file.write_text(
            """
[model]
provider = "openai"
max_output_tokens = 8000

[export]
specs_dir = "docs/specs"

[logging]
level = "debug"
format = "json"
""",
            encoding="utf-8",
        )

        config = load_config(config_file)

        assert config.model.provider == "openai"
        assert config.model.max_output_tokens == 8000
        assert config.export.specs_dir == "docs/specs"
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"

    def test_invalid_values_raise(self, isolated: Path) -> None:
        config_file = isolated / "invalid.toml"
        config_file.write_text('[model]\nprovider = "acme"\n', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_file)

    def test_search_current_directory(self, isolated: Path) -> None:
        (isolated / "sketchforge.toml").write_text(
            '[export]\noutput_dir = "out"\n', encoding="utf-8"
        )
        config = load_config()
        assert config.export.output_dir == Path("out")

    def test_environment_variable_override(
        self, isolated: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKETCHFORGE_MODEL__PROVIDER", "openai")
        monkeypatch.setenv("SKETCHFORGE_LOGGING__LEVEL", "WARNING")

        config = load_config()

        assert config.model.provider == "openai"
        assert config.logging.level == "WARNING"

    def test_environment_overrides_toml_file(
        self, isolated: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = isolated / "config.toml"
        config_file.write_text(
            '[model]\nprovider = "openai"\ntimeout_seconds = 60\n'
            '[logging]\nlevel = "ERROR"\n',
            encoding="utf-8",
        )
        monkeypatch.setenv("SKETCHFORGE_MODEL__PROVIDER", "anthropic")

        config = load_config(config_file)

        assert config.model.provider == "anthropic"
        # Keys without an environment value still come from the file
        assert config.model.timeout_seconds == 60
        assert config.logging.level == "ERROR"

    def test_api_key_is_not_configurable(self, isolated: Path) -> None:
        config_file = isolated / "secret.toml"
        config_file.write_text('[model]\napi_key = "sk-nope"\n', encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(config_file)
