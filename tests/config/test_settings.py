"""Tests for layered configuration resolution."""

from pathlib import Path

import pytest

from beeper_cli.config.settings import (
    DEFAULT_API_URL,
    DEFAULT_OUTPUT_FORMAT,
    CliSettings,
    ConfigLayer,
    EffectiveConfig,
    EnvConfig,
    resolve,
    validate_config,
)
from beeper_cli.domain.errors import APIError, ErrorCategory


class TestResolve:
    def test_all_defaults(self) -> None:
        config = resolve()
        assert config.api_url == DEFAULT_API_URL == "http://localhost:39867"
        assert config.output_format == DEFAULT_OUTPUT_FORMAT == "json"

    def test_file_overrides_defaults(self) -> None:
        config = resolve(ConfigLayer(api_url="http://file:1"))
        assert config.api_url == "http://file:1"
        assert config.output_format == "json"

    def test_env_overrides_file(self) -> None:
        config = resolve(
            ConfigLayer(api_url="http://file:1", output_format="text"),
            ConfigLayer(api_url="http://env:2"),
        )
        assert config.api_url == "http://env:2"
        assert config.output_format == "text"

    def test_flag_overrides_env(self) -> None:
        config = resolve(
            ConfigLayer(output_format="text"),
            ConfigLayer(output_format="markdown"),
            ConfigLayer(output_format="json"),
        )
        assert config.output_format == "json"

    def test_empty_values_inherit(self) -> None:
        config = resolve(
            ConfigLayer(api_url="http://file:1"),
            ConfigLayer(api_url=""),
            ConfigLayer(),
        )
        assert config.api_url == "http://file:1"

    def test_never_empty(self) -> None:
        config = resolve(ConfigLayer(), ConfigLayer(), ConfigLayer())
        assert config.api_url
        assert config.output_format


class TestValidate:
    def test_valid(self) -> None:
        config = EffectiveConfig(output_format="markdown")
        assert validate_config(config) is config

    def test_bad_format(self) -> None:
        with pytest.raises(APIError) as exc_info:
            validate_config(EffectiveConfig(output_format="yaml"))
        assert exc_info.value.category is ErrorCategory.CONFIG
        assert "yaml" in exc_info.value.message

    def test_empty_url(self) -> None:
        with pytest.raises(APIError, match="api_url"):
            validate_config(EffectiveConfig(api_url=""))


class TestEnvConfig:
    def test_reads_prefixed_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEEPER_API_URL", "http://env:9")
        monkeypatch.setenv("BEEPER_OUTPUT_FORMAT", "text")
        monkeypatch.setenv("BEEPER_TOKEN", "secret-token")
        env = EnvConfig()
        assert env.layer() == ConfigLayer(api_url="http://env:9", output_format="text")
        assert env.token == "secret-token"
        assert env.config == ""

    def test_empty_var_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEEPER_API_URL", "")
        assert EnvConfig().api_url == ""


class TestCliSettings:
    def test_defaults_without_file(self, config_file: Path) -> None:
        settings = CliSettings.from_cli()
        assert settings.config == EffectiveConfig()
        assert settings.config_path == config_file
        assert settings.token == ""
        assert settings.check_updates is False  # disabled by the test env

    def test_full_precedence(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("api_url: http://file:1\noutput_format: text\n")
        monkeypatch.setenv("BEEPER_API_URL", "http://env:2")
        monkeypatch.setenv("BEEPER_OUTPUT_FORMAT", "markdown")

        settings = CliSettings.from_cli(config_path=str(path), output="json")
        assert settings.config.api_url == "http://env:2"
        assert settings.config.output_format == "json"

    def test_config_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "alt.yaml"
        path.write_text("output_format: markdown\n")
        monkeypatch.setenv("BEEPER_CONFIG", str(path))
        settings = CliSettings.from_cli()
        assert settings.config_path == path
        assert settings.config.output_format == "markdown"

    def test_cache_path_beside_config(self, config_file: Path) -> None:
        assert CliSettings.from_cli().cache_path == config_file.parent / "update-cache.json"

    def test_bad_env_value_is_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEEPER_NO_UPDATE_CHECK", "maybe")
        with pytest.raises(APIError) as exc_info:
            CliSettings.from_cli()
        assert exc_info.value.category is ErrorCategory.CONFIG
        assert "BEEPER_" in exc_info.value.message

    def test_invalid_format_kept_until_validated(self) -> None:
        settings = CliSettings.from_cli(output="yaml")
        assert settings.config.output_format == "yaml"

    def test_frozen(self) -> None:
        settings = CliSettings.from_cli()
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]
