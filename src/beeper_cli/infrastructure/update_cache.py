"""Persistence for the update-check cache.

One JSON file shared by every invocation.  There is no locking: concurrent
processes race and the last writer wins.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

CACHE_TTL = timedelta(hours=24)


class UpdateCacheRecord(BaseModel):
    """Result of the last remote release check."""

    model_config = {"frozen": True}

    last_check: datetime
    latest_version: str = ""
    release_url: str = ""
    current_version: str = ""

    def is_fresh(self, current_version: str, now: datetime | None = None) -> bool:
        """Usable only for the same running version and within :data:`CACHE_TTL`."""
        now = now or datetime.now(UTC)
        last_check = self.last_check
        if last_check.tzinfo is None:
            last_check = last_check.replace(tzinfo=UTC)
        return self.current_version == current_version and now - last_check < CACHE_TTL


def load_cache(path: Path) -> UpdateCacheRecord | None:
    """Read the cache, or None when it is missing or unreadable."""
    try:
        raw = path.read_bytes()
    except OSError:
        return None
    try:
        return UpdateCacheRecord.model_validate_json(raw)
    except ValidationError:
        logger.debug("Ignoring corrupt update cache at %s", path)
        return None


def save_cache(path: Path, record: UpdateCacheRecord) -> None:
    """Write the cache, creating its directory.

    Raises:
        OSError: when the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
