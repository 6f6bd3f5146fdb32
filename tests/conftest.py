"""Shared pytest fixtures and test helpers for beeper-cli tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temp dir and drop any BEEPER_* settings from the host.

    The background update check is disabled so no test reaches the network.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for name in ("BEEPER_API_URL", "BEEPER_OUTPUT_FORMAT", "BEEPER_TOKEN", "BEEPER_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BEEPER_NO_UPDATE_CHECK", "1")
    return home


@pytest.fixture
def config_file(_isolated_env: Path) -> Path:
    """Default config file location (not created)."""
    return _isolated_env / ".beeper-api-cli" / "config.yaml"


class RecordingHandler:
    """MockTransport handler that records requests and dispatches by path."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response | Exception]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self)

    @property
    def obj(self) -> dict[str, Any]:
        """Seed for ``CliRunner.invoke(obj=...)``; the root group picks up the transport."""
        return {"transport": self.transport}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.routes.get((request.method, request.url.path))
        if outcome is None:
            return httpx.Response(404, json={"error": f"no route for {request.url.path}"})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def mock_api() -> Callable[..., RecordingHandler]:
    """Build a recording MockTransport for the CLI to use.

    Usage::

        api = mock_api({("GET", "/v1/chats"): httpx.Response(200, json=...)})
        cli_runner.invoke(cli, ["chats", "list"], obj=api.obj)
    """
    return RecordingHandler


# ---------------------------------------------------------------------------
# Shared payload helpers
# ---------------------------------------------------------------------------


def chat_payload(chat_id: str = "!chat1:beeper.local", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": chat_id,
        "name": "Team",
        "participants": ["alice", "bob"],
        "unreadCount": 2,
        "lastMessage": "see you",
        "updatedAt": "2024-05-01T12:30:00Z",
    }
    payload.update(overrides)
    return payload


def message_payload(msg_id: str = "m1", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": msg_id,
        "text": "hello",
        "sender": "alice",
        "timestamp": 1714566600,
    }
    payload.update(overrides)
    return payload


def json_response(
    status: int, body: Any, headers: dict[str, str] | None = None
) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(body).encode(), headers=headers)
