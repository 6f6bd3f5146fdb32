"""UpdateChecker — cached, non-blocking check for newer releases.

Pipeline: CACHE → FETCH → COMPARE → PERSIST

The check runs on a daemon thread and reports through a
:class:`~concurrent.futures.Future`.  The caller polls that future once,
without waiting; if the check has not finished the notice is simply not
shown for that invocation.  The future may never be observed.

INVARIANT: Persisting the cache is best-effort; a write failure never
fails the check.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from datetime import UTC, datetime
from pathlib import Path

import httpx
from pydantic import BaseModel, ValidationError

from beeper_cli import DEV_VERSION
from beeper_cli.domain.errors import (
    APIError,
    ErrorCategory,
    ErrorRecord,
    classify,
    classify_network_failure,
)
from beeper_cli.domain.models import Release
from beeper_cli.infrastructure.update_cache import UpdateCacheRecord, load_cache, save_cache

logger = logging.getLogger(__name__)

RELEASES_URL = "https://api.github.com/repos/nerveband/beeper-api-cli/releases/latest"
FEED_TIMEOUT = 5.0


class UpdateInfo(BaseModel):
    """Outcome of an update check."""

    model_config = {"frozen": True}

    current_version: str
    latest_version: str = ""
    release_url: str = ""
    update_available: bool = False


def normalize_version(version: str) -> str:
    """Strip a leading ``v`` prefix."""
    return version.removeprefix("v")


def is_newer(current: str, latest: str) -> bool:
    """Return True if *latest* sorts after *current*.

    Plain lexicographic string comparison, not semantic-version precedence:
    ``is_newer("1.9.0", "1.10.0")`` is False.  The development sentinel
    (or an empty version) never reports an update.
    """
    current = normalize_version(current)
    latest = normalize_version(latest)
    if current in (DEV_VERSION, ""):
        return False
    return latest > current


def format_update_notice(info: UpdateInfo | None) -> str:
    """Human-readable notice, or ``""`` when no update is available."""
    if info is None or not info.update_available:
        return ""
    return (
        f"\nUpdate available: {info.current_version} -> {info.latest_version}\n"
        f"Run 'pip install --upgrade beeper-cli' to update, or visit:\n"
        f"{info.release_url}\n"
    )


class UpdateChecker:
    """Checks a release feed for newer versions, caching results on disk.

    Parameters:
        cache_path: Location of the shared cache file.
        feed_url: Release feed endpoint returning ``{tag_name, html_url, ...}``.
        timeout: Bound on the single feed request, in seconds.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
        clock: Returns the current aware UTC time.
    """

    def __init__(
        self,
        cache_path: Path,
        *,
        feed_url: str = RELEASES_URL,
        timeout: float = FEED_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._cache_path = cache_path
        self._feed_url = feed_url
        self._timeout = timeout
        self._transport = transport
        self._clock = clock or (lambda: datetime.now(UTC))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(self, current_version: str) -> UpdateInfo:
        """Synchronous check: use a fresh cache record, else query the feed.

        Raises:
            APIError: when the feed cannot be reached or returns bad data.
        """
        now = self._clock()
        cached = load_cache(self._cache_path)
        if cached is not None and cached.is_fresh(current_version, now):
            logger.debug("Update check served from cache (%s)", cached.latest_version)
            return UpdateInfo(
                current_version=current_version,
                latest_version=cached.latest_version,
                release_url=cached.release_url,
                update_available=is_newer(current_version, cached.latest_version),
            )

        release = self._fetch_latest()
        latest = normalize_version(release.tag_name)
        info = UpdateInfo(
            current_version=current_version,
            latest_version=latest,
            release_url=release.html_url,
            update_available=is_newer(current_version, latest),
        )
        self._persist(
            UpdateCacheRecord(
                last_check=now,
                latest_version=latest,
                release_url=release.html_url,
                current_version=current_version,
            )
        )
        return info

    def check_async(self, current_version: str) -> Future[UpdateInfo]:
        """Start :meth:`check` on a daemon thread and return its future.

        Never blocks.  The thread is not joined at exit, so an unfinished
        check is abandoned with the process.
        """
        future: Future[UpdateInfo] = Future()

        def _run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self.check(current_version))
            except Exception as exc:
                future.set_exception(exc)

        threading.Thread(target=_run, name="beeper-update-check", daemon=True).start()
        return future

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fetch_latest(self) -> Release:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "beeper-cli",
        }
        logger.debug("Fetching latest release from %s", self._feed_url)
        try:
            with httpx.Client(
                timeout=self._timeout, headers=headers, transport=self._transport
            ) as client:
                response = client.get(self._feed_url)
        except httpx.TransportError as exc:
            raise APIError(classify_network_failure(exc, operation="check_update")) from exc

        if response.status_code != httpx.codes.OK:
            raise APIError(
                classify(response.status_code, response.content, operation="check_update")
            )
        try:
            return Release.model_validate_json(response.content)
        except ValidationError as exc:
            raise APIError(
                ErrorRecord(
                    message=f"failed to decode release feed: {exc}",
                    category=ErrorCategory.SERVER,
                    operation="check_update",
                    cause=exc,
                )
            ) from exc

    def _persist(self, record: UpdateCacheRecord) -> None:
        try:
            save_cache(self._cache_path, record)
        except OSError:
            logger.debug("Could not write update cache %s", self._cache_path, exc_info=True)


def poll_notice(future: Future[UpdateInfo] | None) -> str:
    """Non-blocking read of a pending check. ``""`` unless done with an update."""
    if future is None or not future.done():
        return ""
    exc = future.exception(timeout=0)
    if exc is not None:
        logger.debug("Update check failed: %s", exc)
        return ""
    return format_update_notice(future.result(timeout=0))
