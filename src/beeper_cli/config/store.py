"""Persisted config file discovery, loading, and saving.

The config file is YAML at ``~/.beeper-api-cli/config.yaml`` with two
keys, ``api_url`` and ``output_format``.  ``BEEPER_CONFIG`` or the
``--config`` CLI flag point at a different file.  The update cache lives
beside it as ``update-cache.json``.
"""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from beeper_cli.config.settings import DEFAULTS, ConfigLayer
from beeper_cli.domain.errors import config_error

CONFIG_DIRNAME = ".beeper-api-cli"
CONFIG_FILENAME = "config.yaml"
CACHE_FILENAME = "update-cache.json"


def _new_yaml() -> YAML:
    """Fresh round-trip YAML instance (ruamel's YAML object is stateful)."""
    yaml = YAML()
    yaml.default_flow_style = False
    return yaml


def config_dir() -> Path:
    """Per-user directory holding the config file and update cache."""
    return Path.home() / CONFIG_DIRNAME


def default_config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def find_config(
    explicit: str | Path | None = None, env_path: str | Path | None = None
) -> Path:
    """Resolve the config file path.

    Priority: explicit path (``--config``), *env_path* (``BEEPER_CONFIG``,
    read by :class:`~beeper_cli.config.settings.EnvConfig`), the per-user
    default.  The returned file need not exist.
    """
    for candidate in (explicit, env_path):
        if candidate:
            return Path(candidate).expanduser()
    return default_config_path()


def cache_path_for(config_path: Path) -> Path:
    """The update cache is a sibling of the config file."""
    return config_path.parent / CACHE_FILENAME


def load_config_file(path: Path) -> ConfigLayer:
    """Load the persisted layer from *path*.

    A missing file is an empty layer, so defaults apply.  An unreadable or
    malformed file raises a ``config`` category error.
    """
    if not path.is_file():
        return ConfigLayer()

    try:
        raw = path.read_text(encoding="utf-8")
        data: Any = _new_yaml().load(raw)
    except (OSError, UnicodeDecodeError, YAMLError) as exc:
        raise config_error(f"failed to read config {path}: {exc}", cause=exc) from exc

    if data is None:
        return ConfigLayer()
    if not isinstance(data, dict):
        raise config_error(f"invalid config {path}: expected a mapping of settings")

    return ConfigLayer(
        api_url=str(data.get("api_url") or ""),
        output_format=str(data.get("output_format") or ""),
    )


def save_config_file(path: Path, update: ConfigLayer) -> ConfigLayer:
    """Merge *update* over the file (and defaults) and write it back.

    Returns the layer that was written.
    """
    merged = DEFAULTS.merged_with(load_config_file(path)).merged_with(update)

    buf = StringIO()
    _new_yaml().dump(
        {"api_url": merged.api_url, "output_format": merged.output_format},
        buf,
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(buf.getvalue(), encoding="utf-8")
    except OSError as exc:
        raise config_error(f"failed to write config {path}: {exc}", cause=exc) from exc
    return merged
