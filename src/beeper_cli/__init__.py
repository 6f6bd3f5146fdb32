"""beeper-cli — command-line client for the Beeper Desktop API."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DEV_VERSION = "dev"

try:
    __version__ = version("beeper-cli")
except PackageNotFoundError:
    __version__ = DEV_VERSION
