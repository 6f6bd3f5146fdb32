"""HTTP transport for the Beeper Desktop API.

Every failure leaves this module as an :class:`~beeper_cli.domain.errors.APIError`
classified at the point of detection:

* connection failures (DNS, refused, timeout) → ``network``
* non-2xx responses → :func:`~beeper_cli.domain.errors.classify`
* 2xx responses with an unparseable body → ``server``

Each operation returns an :class:`APIResponse` carrying the payload and
the ``X-Beeper-Desktop-Version`` header of that response, so callers never
depend on shared mutable state.  A single client instance is still not
meant to be shared across threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from beeper_cli.config.settings import EffectiveConfig
from beeper_cli.domain.errors import (
    APIError,
    ErrorCategory,
    ErrorRecord,
    classify,
    classify_network_failure,
    config_error,
    hint_for,
    validation_error,
)
from beeper_cli.domain.models import (
    Chat,
    ChatsPage,
    Message,
    MessagesPage,
    SearchPage,
    SendResult,
    SentMessage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

VERSION_HEADER = "X-Beeper-Desktop-Version"
DEFAULT_TIMEOUT = 30.0
DISCOVERY_PORTS = (39867, 39868, 39869)


@dataclass(frozen=True)
class APIResponse(Generic[T]):
    """A decoded payload plus the desktop version advertised with it."""

    payload: T
    server_version: str | None = None


class BeeperClient:
    """Client for the Beeper Desktop API.

    Parameters:
        config: Effective configuration (supplies the base URL).
        token: Bearer token. Absence is not an error here; the API answers
            401, which is classified as ``auth``.
        quiet: Omit hints from every error this client produces.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        config: EffectiveConfig,
        token: str | None = None,
        *,
        quiet: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = config.api_url.rstrip("/")
        self._token = token or ""
        self._quiet = quiet
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None
        self._last_server_version: str | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def has_auth_token(self) -> bool:
        return bool(self._token)

    @property
    def last_server_version(self) -> str | None:
        """Desktop version from the most recent response that carried one."""
        return self._last_server_version

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.Client(
                timeout=self._timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> BeeperClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ping(self) -> APIResponse[None]:
        """Check that the API is reachable (``GET /health``)."""
        response = self._request("GET", "/health", operation="ping")
        return APIResponse(payload=None, server_version=response.server_version)

    def list_chats(self) -> APIResponse[list[Chat]]:
        response = self._request("GET", "/v1/chats", operation="list_chats")
        page = self._decode(response, ChatsPage, operation="list_chats")
        return APIResponse(payload=page.items, server_version=response.server_version)

    def get_chat(self, chat_id: str) -> APIResponse[Chat]:
        self._require(chat_id, "chat ID is required", operation="get_chat")
        response = self._request("GET", f"/v1/chats/{chat_id}", operation="get_chat")
        chat = self._decode(response, Chat, operation="get_chat")
        return APIResponse(payload=chat, server_version=response.server_version)

    def list_messages(self, chat_id: str, limit: int = 20) -> APIResponse[list[Message]]:
        self._require(chat_id, "chat ID is required", operation="list_messages")
        response = self._request(
            "GET",
            f"/v1/chats/{chat_id}/messages",
            params={"limit": limit},
            operation="list_messages",
        )
        page = self._decode(response, MessagesPage, operation="list_messages")
        return APIResponse(payload=page.items, server_version=response.server_version)

    def send_message(self, chat_id: str, text: str) -> APIResponse[SendResult]:
        """Send *text* to *chat_id*.

        Both arguments are validated before any network call is made.
        """
        self._require(chat_id, "chat ID is required", operation="send_message")
        self._require(text, "message text cannot be empty", operation="send_message")
        response = self._request(
            "POST",
            f"/v1/chats/{chat_id}/messages",
            json_body={"text": text},
            operation="send_message",
        )
        sent = self._decode(response, SentMessage, operation="send_message")
        return APIResponse(
            payload=SendResult(message_id=sent.id, success=True),
            server_version=response.server_version,
        )

    def search_messages(self, query: str, limit: int = 20) -> APIResponse[list[Message]]:
        self._require(query, "search query cannot be empty", operation="search_messages")
        response = self._request(
            "GET",
            "/v1/messages/search",
            params={"q": query, "limit": limit},
            operation="search_messages",
        )
        page = self._decode(response, SearchPage, operation="search_messages")
        return APIResponse(payload=page.items, server_version=response.server_version)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _require(self, value: str, message: str, *, operation: str) -> None:
        if not value or not value.strip():
            raise validation_error(message, operation=operation)

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> APIResponse[bytes]:
        """Execute one request and return the raw body of a 2xx response."""
        url = f"{self._base_url}{path}"
        try:
            request = self.client.build_request(method, url, params=params, json=json_body)
        except (TypeError, ValueError) as exc:
            raise APIError(
                ErrorRecord(
                    message=f"failed to encode request: {exc}",
                    category=ErrorCategory.VALIDATION,
                    operation=operation,
                    cause=exc,
                )
            ) from exc
        except httpx.InvalidURL as exc:
            raise config_error(f"invalid API URL {self._base_url!r}: {exc}", cause=exc) from exc

        try:
            response = self.client.send(request)
        except httpx.UnsupportedProtocol as exc:
            raise config_error(f"invalid API URL {self._base_url!r}: {exc}", cause=exc) from exc
        except httpx.TransportError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            record = classify_network_failure(exc, operation=operation, quiet=self._quiet)
            raise APIError(record) from exc

        server_version = response.headers.get(VERSION_HEADER) or None
        if server_version:
            self._last_server_version = server_version
        logger.debug("%s %s -> %s", method, path, response.status_code)

        if not response.is_success:
            raise APIError(
                classify(
                    response.status_code,
                    response.content,
                    operation=operation,
                    quiet=self._quiet,
                )
            )
        return APIResponse(payload=response.content, server_version=server_version)

    def _decode(self, response: APIResponse[bytes], model: type[M], *, operation: str) -> M:
        """Parse a 2xx body; failure means the server produced bad output."""
        try:
            return model.model_validate_json(response.payload)
        except ValidationError as exc:
            raise APIError(
                ErrorRecord(
                    message=f"failed to decode {operation} response: {exc}",
                    category=ErrorCategory.SERVER,
                    operation=operation,
                    hint=None if self._quiet else hint_for(ErrorCategory.SERVER),
                    cause=exc,
                )
            ) from exc


def discover_api(
    ports: tuple[int, ...] = DISCOVERY_PORTS,
    *,
    host: str = "localhost",
    timeout: float = 2.0,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Return the first ``http://<host>:<port>`` whose ``/health`` answers.

    Raises:
        APIError: ``network`` category when no candidate responds.
    """
    for port in ports:
        url = f"http://{host}:{port}"
        with BeeperClient(
            EffectiveConfig(api_url=url), timeout=timeout, transport=transport
        ) as client:
            try:
                client.ping()
            except APIError as exc:
                logger.debug("discovery: %s unavailable (%s)", url, exc.category)
                continue
        return url

    raise APIError(
        classify_network_failure(
            ConnectionError("could not auto-discover Beeper Desktop API"),
            operation="discover",
        )
    )
