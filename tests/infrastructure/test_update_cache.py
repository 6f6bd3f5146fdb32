"""Tests for the on-disk update-check cache."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

from beeper_cli.infrastructure.update_cache import (
    CACHE_TTL,
    UpdateCacheRecord,
    load_cache,
    save_cache,
)

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)


def _record(age: timedelta, current: str = "1.0.0") -> UpdateCacheRecord:
    return UpdateCacheRecord(
        last_check=NOW - age,
        latest_version="1.1.0",
        release_url="https://example.test/releases/v1.1.0",
        current_version=current,
    )


class TestFreshness:
    def test_ttl_is_24_hours(self) -> None:
        assert CACHE_TTL == timedelta(hours=24)

    def test_just_under_ttl_is_fresh(self) -> None:
        assert _record(timedelta(hours=23, minutes=59)).is_fresh("1.0.0", NOW)

    def test_just_over_ttl_is_stale(self) -> None:
        assert not _record(timedelta(hours=24, minutes=1)).is_fresh("1.0.0", NOW)

    def test_exactly_ttl_is_stale(self) -> None:
        assert not _record(CACHE_TTL).is_fresh("1.0.0", NOW)

    def test_different_running_version_is_stale(self) -> None:
        assert not _record(timedelta(minutes=5)).is_fresh("1.0.1", NOW)

    def test_naive_timestamp_treated_as_utc(self) -> None:
        record = UpdateCacheRecord(
            last_check=(NOW - timedelta(hours=1)).replace(tzinfo=None),
            current_version="1.0.0",
        )
        assert record.is_fresh("1.0.0", NOW)


class TestPersistence:
    def test_save_then_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "update-cache.json"
        record = _record(timedelta(hours=1))
        save_cache(path, record)
        assert load_cache(path) == record

    def test_file_uses_stable_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "update-cache.json"
        save_cache(path, _record(timedelta(0)))
        data = json.loads(path.read_text())
        assert set(data) == {"last_check", "latest_version", "release_url", "current_version"}

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_cache(tmp_path / "absent.json") is None

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "update-cache.json"
        path.write_text("{not json")
        assert load_cache(path) is None
