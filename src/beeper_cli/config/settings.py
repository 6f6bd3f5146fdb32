"""Layered configuration — defaults, YAML file, env vars, CLI flags.

Priority chain (highest to lowest):
  1. CLI flags     — ``--output``
  2. Env vars      — ``BEEPER_*`` prefix, read by Pydantic Settings
  3. YAML file     — ``~/.beeper-api-cli/config.yaml``
  4. Code defaults — :data:`DEFAULT_API_URL`, :data:`DEFAULT_OUTPUT_FORMAT`

Merge rule at every layer: a non-empty value replaces the one below it;
an empty or unset value inherits.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from beeper_cli.domain.errors import config_error

DEFAULT_API_URL = "http://localhost:39867"


class OutputFormat(StrEnum):
    """Supported output formats."""

    JSON = "json"
    TEXT = "text"
    MARKDOWN = "markdown"


DEFAULT_OUTPUT_FORMAT: str = OutputFormat.JSON.value


class ConfigLayer(BaseModel):
    """One precedence layer. Empty strings mean "not set here"."""

    model_config = {"frozen": True}

    api_url: str = ""
    output_format: str = ""

    def merged_with(self, override: ConfigLayer | None) -> ConfigLayer:
        """Return a copy where non-empty fields of *override* win."""
        if override is None:
            return self
        return ConfigLayer(
            api_url=override.api_url or self.api_url,
            output_format=override.output_format or self.output_format,
        )


DEFAULTS = ConfigLayer(api_url=DEFAULT_API_URL, output_format=DEFAULT_OUTPUT_FORMAT)


class EffectiveConfig(BaseModel):
    """Final configuration after all layers are applied.

    Both fields are non-empty by construction.  ``output_format`` is kept
    as given so :func:`validate_config` can reject unknown values.
    """

    model_config = {"frozen": True}

    api_url: str = DEFAULT_API_URL
    output_format: str = DEFAULT_OUTPUT_FORMAT


class EnvConfig(BaseSettings):
    """Environment layer: every ``BEEPER_*`` variable the CLI reads.

    ``BEEPER_CONFIG`` names the config file; the others are settings.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BEEPER_",
        "env_ignore_empty": True,
        "extra": "ignore",
    }

    api_url: str = ""
    output_format: str = ""
    token: str = ""
    config: str = ""
    no_update_check: bool = False

    def layer(self) -> ConfigLayer:
        return ConfigLayer(api_url=self.api_url, output_format=self.output_format)


def resolve(
    file_layer: ConfigLayer | None = None,
    env_layer: ConfigLayer | None = None,
    flag_layer: ConfigLayer | None = None,
) -> EffectiveConfig:
    """Merge defaults < file < env < flags into an :class:`EffectiveConfig`."""
    merged = DEFAULTS.merged_with(file_layer).merged_with(env_layer).merged_with(flag_layer)
    return EffectiveConfig(api_url=merged.api_url, output_format=merged.output_format)


def validate_config(config: EffectiveConfig) -> EffectiveConfig:
    """Reject an empty API URL or an unknown output format.

    Raises:
        APIError: ``config`` category.
    """
    if not config.api_url:
        raise config_error("api_url cannot be empty")
    if config.output_format not in {fmt.value for fmt in OutputFormat}:
        raise config_error(
            f"invalid output format: {config.output_format} (must be json, text, or markdown)"
        )
    return config


class CliSettings(BaseModel):
    """Everything one invocation needs: effective config plus global flags.

    Stored on the :class:`~beeper_cli.commands._context.AppContext` at the
    CLI root and frozen after construction.
    """

    model_config = {"frozen": True}

    config: EffectiveConfig = Field(default_factory=EffectiveConfig)
    config_path: Path | None = None
    token: str = ""
    quiet: bool = False
    json_errors: bool = False
    verbose: bool = False
    log_json: bool = False
    check_updates: bool = True

    @property
    def cache_path(self) -> Path | None:
        from beeper_cli.config.store import cache_path_for

        return cache_path_for(self.config_path) if self.config_path else None

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        output: str | None = None,
        **cli_flags: bool,
    ) -> CliSettings:
        """Construct settings from a CLI invocation.

        Locates and loads the YAML file, reads ``BEEPER_*`` env vars, and
        applies ``--output`` as the highest-priority override.
        """
        from beeper_cli.config.store import find_config, load_config_file

        try:
            env = EnvConfig()
        except ValidationError as exc:
            message = f"invalid BEEPER_* environment variable: {exc}"
            raise config_error(message, cause=exc) from exc
        path = find_config(config_path, env.config)
        config = resolve(
            load_config_file(path),
            env.layer(),
            ConfigLayer(output_format=output or ""),
        )
        return cls(
            config=config,
            config_path=path,
            token=env.token,
            check_updates=not env.no_update_check,
            **cli_flags,
        )
