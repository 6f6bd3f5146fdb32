"""Error taxonomy and classifier for Beeper Desktop API failures.

Every failure surfaced by the transport or the config resolver is an
:class:`APIError` carrying exactly one :class:`ErrorRecord`.  Records are
classified once, where the failure is detected, and never re-classified
downstream: renderers and the exit-code mapper only read ``category``.

INVARIANT: ``ErrorRecord.category`` is always one of :class:`ErrorCategory`.
"""

from __future__ import annotations

import json
from enum import StrEnum
from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field


class ErrorCategory(StrEnum):
    """Closed set of error categories used for hints and exit codes."""

    AUTH = "auth"
    CONFIG = "config"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    VALIDATION = "validation"
    SERVER = "server"
    UNKNOWN = "unknown"


class ErrorRecord(BaseModel):
    """Structured, immutable description of one failure.

    ``cause`` holds the underlying exception (if any) and is never
    serialized.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    message: str
    category: ErrorCategory
    code: str | None = None
    status_code: int | None = None
    operation: str | None = None
    hint: str | None = None
    cause: BaseException | None = Field(default=None, exclude=True, repr=False)


class APIError(Exception):
    """Exception wrapper around an :class:`ErrorRecord`.

    ``__cause__`` is the record's cause, so ``raise ... from`` chains and
    tracebacks show the underlying failure.
    """

    def __init__(self, record: ErrorRecord) -> None:
        super().__init__(record.message)
        self._record = record
        self.__cause__ = record.cause

    @property
    def record(self) -> ErrorRecord:
        return self._record

    @property
    def message(self) -> str:
        return self._record.message

    @property
    def category(self) -> ErrorCategory:
        return self._record.category

    @property
    def code(self) -> str | None:
        return self._record.code

    @property
    def status_code(self) -> int | None:
        return self._record.status_code

    @property
    def operation(self) -> str | None:
        return self._record.operation

    @property
    def hint(self) -> str | None:
        return self._record.hint

    def __str__(self) -> str:
        if self._record.code:
            return f"{self._record.code}: {self._record.message}"
        return self._record.message


# ── Hints ─────────────────────────────────────────────────────────────

NETWORK_HINT = (
    "Check that Beeper Desktop is running and the API is enabled. "
    "Try 'beeper discover' to find the API."
)
CONNECTION_REFUSED_HINT = (
    "Beeper Desktop may not be running. Start Beeper Desktop and ensure the API is enabled."
)
HOST_RESOLUTION_HINT = (
    "Could not resolve the API host. Check your network connection and API URL configuration."
)
TIMEOUT_HINT = (
    "The request timed out. Check if Beeper Desktop is responding and your network is stable."
)
CHAT_NOT_FOUND_HINT = (
    "Verify the chat ID is correct. Use 'beeper chats list' to see available chats."
)
CONFIG_HINT = (
    "Check your configuration with 'beeper config show'. "
    "Reset with 'beeper config set-url http://localhost:39867'."
)

_CATEGORY_HINTS: dict[ErrorCategory, str] = {
    ErrorCategory.AUTH: (
        "Set BEEPER_TOKEN environment variable with a valid API token. "
        "Generate one in Beeper Desktop settings."
    ),
    ErrorCategory.CONFIG: CONFIG_HINT,
    ErrorCategory.PERMISSION: (
        "Your token may lack the required scope. "
        "Check token permissions in Beeper Desktop settings."
    ),
    ErrorCategory.NOT_FOUND: "The requested resource was not found. Verify the ID is correct.",
    ErrorCategory.NETWORK: NETWORK_HINT,
    ErrorCategory.VALIDATION: "Check the command arguments. Use --help for usage information.",
    ErrorCategory.SERVER: (
        "The Beeper Desktop API returned a server error. Try restarting Beeper Desktop."
    ),
    ErrorCategory.UNKNOWN: "",
}

# Operations whose not_found almost always means a bad chat ID.
_CHAT_OPERATIONS = frozenset({"get_chat", "list_messages"})

_HOST_MARKERS = ("no such host", "name or service not known", "nodename nor servname")

# (needles, hint) pairs checked in order against lowercased failure text.
_NETWORK_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("connection refused",), CONNECTION_REFUSED_HINT),
    (_HOST_MARKERS, HOST_RESOLUTION_HINT),
    (("timeout", "timed out"), TIMEOUT_HINT),
)
_MESSAGE_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    *_NETWORK_HINTS,
    (
        ("unauthorized", "401"),
        "Authentication required. Set BEEPER_TOKEN environment variable with a valid API token.",
    ),
    (("forbidden", "403"), "Access denied. Your token may lack the required permissions."),
    (
        ("not found", "404"),
        "Resource not found. Verify the ID is correct using 'beeper chats list'.",
    ),
    (("config",), "Configuration error. Check your settings with 'beeper config show'."),
)

# Failure text that marks a system/network problem for exit-code purposes.
_SYSTEM_FAILURE_MARKERS = ("connection refused", *_HOST_MARKERS, "timeout", "timed out")


def categorize_status(status_code: int) -> ErrorCategory:
    """Map an HTTP status code to a category. First match wins."""
    if status_code == HTTPStatus.UNAUTHORIZED:
        return ErrorCategory.AUTH
    if status_code == HTTPStatus.FORBIDDEN:
        return ErrorCategory.PERMISSION
    if status_code == HTTPStatus.NOT_FOUND:
        return ErrorCategory.NOT_FOUND
    if status_code == HTTPStatus.BAD_REQUEST:
        return ErrorCategory.VALIDATION
    if status_code >= 500:
        return ErrorCategory.SERVER
    return ErrorCategory.UNKNOWN


def hint_for(category: ErrorCategory, operation: str | None = None) -> str:
    """Return the actionable hint for *category* (empty for ``unknown``)."""
    if category is ErrorCategory.NOT_FOUND and operation in _CHAT_OPERATIONS:
        return CHAT_NOT_FOUND_HINT
    return _CATEGORY_HINTS[category]


def _match_hint(message: str, table: tuple[tuple[tuple[str, ...], str], ...]) -> str:
    lowered = message.lower()
    for needles, hint in table:
        if any(needle in lowered for needle in needles):
            return hint
    return ""


def generic_hint(message: str) -> str:
    """Derive a hint from free-form failure text (empty if nothing matches)."""
    return _match_hint(message, _MESSAGE_HINTS)


def _extract_message(body: bytes | str) -> tuple[str, str | None]:
    """Pull ``(message, code)`` out of an error body.

    Priority: JSON ``error``, then JSON ``message``, then the raw body.
    The message is empty when the body is empty.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    try:
        data: Any = json.loads(text)
    except ValueError:
        return text.strip(), None
    if not isinstance(data, dict):
        return text.strip(), None

    code = data.get("code")
    code = str(code) if code else None
    for key in ("error", "message"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value, code
    return text.strip(), code


def classify(
    status_code: int,
    body: bytes | str,
    *,
    operation: str | None = None,
    quiet: bool = False,
) -> ErrorRecord:
    """Classify a non-2xx HTTP response.

    Pure function: the same ``(status_code, body)`` always yields the same
    category and message.  *quiet* drops the hint entirely.
    """
    message, code = _extract_message(body)
    if not message:
        try:
            message = HTTPStatus(status_code).phrase
        except ValueError:
            message = f"HTTP {status_code}"

    category = categorize_status(status_code)
    hint = None if quiet else (hint_for(category, operation) or None)
    return ErrorRecord(
        message=message,
        code=code,
        category=category,
        status_code=status_code,
        operation=operation,
        hint=hint,
    )


def classify_network_failure(
    cause: BaseException,
    *,
    operation: str | None = None,
    quiet: bool = False,
) -> ErrorRecord:
    """Classify a failed connection attempt (DNS, refused, timeout)."""
    detail = str(cause) or type(cause).__name__
    hint = None if quiet else (_match_hint(detail, _NETWORK_HINTS) or NETWORK_HINT)
    return ErrorRecord(
        message=f"failed to connect to API: {detail}",
        category=ErrorCategory.NETWORK,
        operation=operation,
        hint=hint,
        cause=cause,
    )


def config_error(message: str, *, cause: BaseException | None = None) -> APIError:
    """Build a ``config`` category error."""
    return APIError(
        ErrorRecord(
            message=message,
            category=ErrorCategory.CONFIG,
            hint=CONFIG_HINT,
            cause=cause,
        )
    )


def validation_error(message: str, *, operation: str | None = None) -> APIError:
    """Build a ``validation`` category error (raised before any network call)."""
    return APIError(
        ErrorRecord(
            message=message,
            category=ErrorCategory.VALIDATION,
            operation=operation,
            hint=hint_for(ErrorCategory.VALIDATION),
        )
    )


def record_from_exception(exc: BaseException) -> ErrorRecord:
    """Return the record of an :class:`APIError`, or wrap any other exception."""
    if isinstance(exc, APIError):
        return exc.record
    message = str(exc) or type(exc).__name__
    return ErrorRecord(
        message=message,
        category=ErrorCategory.UNKNOWN,
        hint=generic_hint(message) or None,
        cause=exc,
    )


def exit_code_for(exc: BaseException) -> int:
    """Map a failure to a process exit code.

    * ``2``: system/network: ``network`` or ``server`` category, or an
      unclassified error whose text reads like a connection failure.
    * ``1``: everything else (user/application error).
    """
    if isinstance(exc, APIError):
        if exc.category in (ErrorCategory.NETWORK, ErrorCategory.SERVER):
            return 2
        return 1
    lowered = str(exc).lower()
    if any(marker in lowered for marker in _SYSTEM_FAILURE_MARKERS):
        return 2
    return 1
