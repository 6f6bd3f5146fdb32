"""JSON / text / markdown projections of API entities and errors.

The CLI renders results for machines (json, the default) or humans
(text, markdown).  Empty listings are never an empty string: json
renders ``[]`` and the human formats render a "No ... found." sentence.

Unknown formats fall back to json for listings but raise
:class:`UnsupportedFormatError` for send results.
"""

from __future__ import annotations

import json as _json
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from beeper_cli.config.settings import OutputFormat

if TYPE_CHECKING:
    from pydantic import BaseModel

    from beeper_cli.domain.errors import ErrorRecord
    from beeper_cli.domain.models import Chat, Message, SendResult

MESSAGE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class UnsupportedFormatError(ValueError):
    """Raised when a renderer has no projection for the requested format."""


# ── Helpers ───────────────────────────────────────────────────────────


def _dump_json(items: Sequence[BaseModel]) -> str:
    payload = [item.model_dump(mode="json", by_alias=True) for item in items]
    return _json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _rfc3339(value: datetime | None) -> str:
    """RFC 3339 at second precision, ``Z`` for UTC."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def message_time(timestamp: int) -> str:
    """Epoch seconds as ``YYYY-MM-DD HH:MM:SS`` in local time."""
    return datetime.fromtimestamp(timestamp).strftime(MESSAGE_TIME_FORMAT)


# ── Chats ─────────────────────────────────────────────────────────────


def _chats_text(chats: Sequence[Chat]) -> str:
    blocks: list[str] = []
    for chat in chats:
        blocks.append(
            f"ID: {chat.id}\n"
            f"Name: {chat.name}\n"
            f"Participants: {', '.join(chat.participants)}\n"
            f"Unread: {chat.unread_count}\n"
            f"Last Message: {chat.last_message}\n"
            f"Updated: {_rfc3339(chat.updated_at)}\n"
        )
    return "\n".join(blocks) + "\n"


def _chats_markdown(chats: Sequence[Chat]) -> str:
    parts = ["# Chats\n\n"]
    for chat in chats:
        parts.append(f"## {chat.name}\n\n")
        parts.append(f"- **ID**: {chat.id}\n")
        parts.append(f"- **Participants**: {', '.join(chat.participants)}\n")
        parts.append(f"- **Unread**: {chat.unread_count}\n")
        parts.append(f"- **Last Message**: {chat.last_message}\n")
        parts.append(f"- **Updated**: {_rfc3339(chat.updated_at)}\n\n")
    return "".join(parts)


def format_chats(chats: Sequence[Chat], fmt: str) -> str:
    """Render a chat listing. Unknown *fmt* falls back to json."""
    if not chats:
        if fmt in (OutputFormat.TEXT, OutputFormat.MARKDOWN):
            return "No chats found.\n"
        return "[]\n"
    if fmt == OutputFormat.TEXT:
        return _chats_text(chats)
    if fmt == OutputFormat.MARKDOWN:
        return _chats_markdown(chats)
    return _dump_json(chats)


# ── Messages ──────────────────────────────────────────────────────────


def _messages_text(messages: Sequence[Message]) -> str:
    return "".join(
        f"[{message_time(msg.timestamp)}] {msg.sender}: {msg.text}\n" for msg in messages
    )


def _messages_markdown(messages: Sequence[Message]) -> str:
    parts = ["# Messages\n\n"]
    for msg in messages:
        parts.append(f"**{msg.sender}** - {message_time(msg.timestamp)}\n\n")
        parts.append(f"> {msg.text}\n\n")
        parts.append("---\n\n")
    return "".join(parts)


def format_messages(messages: Sequence[Message], fmt: str) -> str:
    """Render a message listing. Unknown *fmt* falls back to json."""
    if not messages:
        if fmt in (OutputFormat.TEXT, OutputFormat.MARKDOWN):
            return "No messages found.\n"
        return "[]\n"
    if fmt == OutputFormat.TEXT:
        return _messages_text(messages)
    if fmt == OutputFormat.MARKDOWN:
        return _messages_markdown(messages)
    return _dump_json(messages)


# ── Send result ───────────────────────────────────────────────────────


def format_send_result(result: SendResult, fmt: str) -> str:
    """Render a send outcome.

    Raises:
        UnsupportedFormatError: for any format other than json/text/markdown.
    """
    if fmt == OutputFormat.JSON:
        return _json.dumps(result.model_dump(mode="json", by_alias=True), indent=2) + "\n"
    if fmt == OutputFormat.TEXT:
        if result.success:
            return f"Message sent successfully. ID: {result.message_id}\n"
        return "Failed to send message\n"
    if fmt == OutputFormat.MARKDOWN:
        if result.success:
            return f"**Message sent successfully**\n\nID: `{result.message_id}`\n"
        return "**Failed to send message**\n"
    raise UnsupportedFormatError(f"unsupported format: {fmt}")


# ── Errors ────────────────────────────────────────────────────────────


def error_payload(record: ErrorRecord, *, quiet: bool = False) -> dict[str, Any]:
    """The machine-readable error object (hint dropped under *quiet*)."""
    return {
        "error": record.message,
        "code": record.code,
        "category": str(record.category),
        "operation": record.operation,
        "hint": None if quiet else record.hint,
    }


def format_error(record: ErrorRecord, *, as_json: bool = False, quiet: bool = False) -> str:
    """Render an error for stderr.

    JSON mode is one line; text mode is ``Error: <message>`` followed, unless
    *quiet* or there is no hint, by a blank line and ``Hint: <hint>``.
    """
    if as_json:
        return _json.dumps(error_payload(record, quiet=quiet), ensure_ascii=False) + "\n"
    text = f"Error: {record.message}\n"
    if record.hint and not quiet:
        text += f"\nHint: {record.hint}\n"
    return text
