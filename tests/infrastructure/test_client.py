"""Tests for BeeperClient using httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from beeper_cli.config.settings import EffectiveConfig
from beeper_cli.domain.errors import (
    CHAT_NOT_FOUND_HINT,
    CONNECTION_REFUSED_HINT,
    APIError,
    ErrorCategory,
)
from beeper_cli.infrastructure.client import BeeperClient, discover_api
from tests.conftest import chat_payload, json_response, message_payload

BASE = "http://localhost:39867"


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    token: str | None = "tok-123",
    **kwargs: bool,
) -> BeeperClient:
    return BeeperClient(
        EffectiveConfig(api_url=BASE),
        token,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _respond(status: int, body: object) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _request: json_response(status, body)


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request: {request.method} {request.url}")


class TestSuccess:
    def test_list_chats(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(200, {"items": [chat_payload()], "hasMore": False})

        response = _client(handler).list_chats()
        assert [chat.name for chat in response.payload] == ["Team"]
        assert seen[0].url == httpx.URL(f"{BASE}/v1/chats")
        assert seen[0].headers["Authorization"] == "Bearer tok-123"
        assert seen[0].headers["Accept"] == "application/json"

    def test_no_token_no_auth_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(200, {"items": []})

        client = _client(handler, token=None)
        assert client.has_auth_token is False
        client.list_chats()
        assert "Authorization" not in seen[0].headers

    def test_get_chat(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/chats/abc"
            return json_response(200, chat_payload("abc"))

        assert _client(handler).get_chat("abc").payload.id == "abc"

    def test_list_messages_passes_limit(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/chats/abc/messages"
            assert request.url.params["limit"] == "5"
            return json_response(200, {"items": [message_payload()]})

        messages = _client(handler).list_messages("abc", limit=5).payload
        assert [m.text for m in messages] == ["hello"]

    def test_send_message_posts_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.headers["Content-Type"] == "application/json"
            assert json.loads(request.content) == {"text": "hi there"}
            return json_response(200, {"id": "msg-7"})

        result = _client(handler).send_message("abc", "hi there").payload
        assert result.message_id == "msg-7"
        assert result.success is True

    def test_search_messages(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/messages/search"
            assert request.url.params["q"] == "dinner"
            assert request.url.params["limit"] == "20"
            return json_response(200, {"items": []})

        assert _client(handler).search_messages("dinner").payload == []

    def test_trailing_slash_in_base_url(self) -> None:
        client = BeeperClient(EffectiveConfig(api_url=f"{BASE}/"))
        assert client.base_url == BASE


class TestServerVersion:
    def test_header_returned_with_payload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(
                200, {"items": []}, headers={"X-Beeper-Desktop-Version": "4.1.2"}
            )

        client = _client(handler)
        response = client.list_chats()
        assert response.server_version == "4.1.2"
        assert client.last_server_version == "4.1.2"

    def test_absent_header(self) -> None:
        response = _client(lambda _r: httpx.Response(200)).ping()
        assert response.server_version is None
        assert response.payload is None

    def test_header_captured_on_error_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(
                500, {"error": "boom"}, headers={"X-Beeper-Desktop-Version": "4.0.0"}
            )

        client = _client(handler)
        with pytest.raises(APIError):
            client.list_chats()
        assert client.last_server_version == "4.0.0"


class TestErrors:
    def test_401_is_auth(self) -> None:
        handler = _respond(401, {"error": "unauthorized"})
        with pytest.raises(APIError) as exc_info:
            _client(handler, token=None).list_chats()
        error = exc_info.value
        assert error.category is ErrorCategory.AUTH
        assert error.status_code == 401
        assert error.operation == "list_chats"
        assert "BEEPER_TOKEN" in (error.hint or "")

    def test_404_get_chat_suggests_listing(self) -> None:
        handler = _respond(404, {"error": "chat not found"})
        with pytest.raises(APIError) as exc_info:
            _client(handler).get_chat("missing")
        assert exc_info.value.category is ErrorCategory.NOT_FOUND
        assert exc_info.value.message == "chat not found"
        assert exc_info.value.hint == CHAT_NOT_FOUND_HINT

    def test_quiet_client_omits_hints(self) -> None:
        handler = _respond(403, {"error": "forbidden"})
        with pytest.raises(APIError) as exc_info:
            _client(handler, quiet=True).list_chats()
        assert exc_info.value.category is ErrorCategory.PERMISSION
        assert exc_info.value.hint is None

    def test_malformed_success_body_is_server(self) -> None:
        with pytest.raises(APIError) as exc_info:
            _client(lambda _r: httpx.Response(200, content=b"<html>not json</html>")).list_chats()
        assert exc_info.value.category is ErrorCategory.SERVER
        assert exc_info.value.__cause__ is not None

    def test_connection_refused_is_network(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

        with pytest.raises(APIError) as exc_info:
            _client(handler).ping()
        error = exc_info.value
        assert error.category is ErrorCategory.NETWORK
        assert error.hint == CONNECTION_REFUSED_HINT
        assert isinstance(error.__cause__, httpx.ConnectError)

    def test_timeout_is_network(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(APIError) as exc_info:
            _client(handler).list_chats()
        assert exc_info.value.category is ErrorCategory.NETWORK

    def test_bad_scheme_is_config(self) -> None:
        client = BeeperClient(EffectiveConfig(api_url="ftp://localhost:1"))
        with pytest.raises(APIError) as exc_info:
            client.ping()
        assert exc_info.value.category is ErrorCategory.CONFIG


class TestValidationBeforeNetwork:
    @pytest.mark.parametrize(
        ("call", "message"),
        [
            (lambda c: c.get_chat(""), "chat ID is required"),
            (lambda c: c.list_messages("  "), "chat ID is required"),
            (lambda c: c.send_message("", "hi"), "chat ID is required"),
            (lambda c: c.send_message("abc", ""), "message text cannot be empty"),
            (lambda c: c.search_messages(""), "search query cannot be empty"),
        ],
    )
    def test_rejected_without_request(
        self, call: Callable[[BeeperClient], object], message: str
    ) -> None:
        with pytest.raises(APIError) as exc_info:
            call(_client(_unreachable))
        assert exc_info.value.category is ErrorCategory.VALIDATION
        assert exc_info.value.message == message


class TestDiscover:
    def test_first_reachable_port(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.port == 39867:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200)

        assert discover_api(transport=httpx.MockTransport(handler)) == "http://localhost:39868"

    def test_error_status_counts_as_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200 if request.url.port == 39869 else 500)

        assert discover_api(transport=httpx.MockTransport(handler)) == "http://localhost:39869"

    def test_none_reachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(APIError) as exc_info:
            discover_api(transport=httpx.MockTransport(handler))
        assert exc_info.value.category is ErrorCategory.NETWORK
        assert "auto-discover" in exc_info.value.message
