"""Pydantic models for Beeper Desktop API entities.

Field aliases follow the API's camelCase wire names. Serializing with
``by_alias=True`` yields the stable JSON field names used by the
output layer.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

# 9999-12-30T00:00:00Z: a day inside datetime.max so any local UTC offset converts.
MAX_TIMESTAMP = 253_402_128_000


class _Entity(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class Chat(_Entity):
    """A chat (conversation) on any Beeper-bridged network."""

    id: str
    name: str = ""
    participants: list[str] = Field(default_factory=list)
    unread_count: int = Field(default=0, alias="unreadCount")
    last_message: str = Field(default="", alias="lastMessage")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class Message(_Entity):
    """A single message. ``timestamp`` is in epoch seconds."""

    id: str
    text: str = ""
    sender: str = ""
    timestamp: int = 0

    @field_validator("timestamp")
    @classmethod
    def _epoch_seconds(cls, value: int) -> int:
        if not 0 <= value <= MAX_TIMESTAMP:
            raise ValueError(f"timestamp {value} is not epoch seconds")
        return value


class SendResult(_Entity):
    """Outcome of a send operation."""

    message_id: str = Field(alias="messageID")
    success: bool = True


# --- Wire envelopes ---


class ChatsPage(_Entity):
    items: list[Chat] = Field(default_factory=list)
    has_more: bool = Field(default=False, alias="hasMore")


class MessagesPage(_Entity):
    items: list[Message] = Field(default_factory=list)
    has_more: bool = Field(default=False, alias="hasMore")


class SearchPage(_Entity):
    items: list[Message] = Field(default_factory=list)


class SentMessage(_Entity):
    id: str


class Release(_Entity):
    """Subset of a GitHub release payload."""

    tag_name: str
    name: str = ""
    published_at: datetime | None = None
    html_url: str = ""
