"""Typed Socket.IO events exchanged with chat clients.

Inbound payloads are validated here, before they reach the router, and turned
into one of a closed set of dataclasses. Outbound events know their Socket.IO
event name and wire payload.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Any
from typing import ClassVar

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

# Client -> server event names
CHAT_MESSAGE = "chat message"
FILE_UPLOAD = "file upload"
TYPING = "typing"
STOP_TYPING = "stop typing"

# Server -> client only
USER_JOINED = "user joined"
USER_LEFT = "user left"
USER_TYPING = "user typing"
USER_STOP_TYPING = "user stop typing"
ERROR = "error"


class InvalidEvent(Exception):  # noqa: N818
    """An inbound event payload failed validation."""

    def __init__(self, event: str, errors: Any):
        super().__init__(f"invalid {event!r} payload")
        self.event = event
        self.errors = errors


def iso_now() -> str:
    """Current UTC time as ``2026-10-17T09:30:00.123Z``."""

    return timezone.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


_id_lock = Lock()
_last_id = 0


def next_event_id() -> str:
    """Millisecond timestamp id, bumped so ids never repeat within the process."""

    global _last_id  # noqa: PLW0603
    with _id_lock:
        _last_id = max(int(time.time() * 1000), _last_id + 1)
        return str(_last_id)


# Inbound -------------------------------------------------------------------


@dataclass(frozen=True)
class ChatMessageSent:
    message: str


@dataclass(frozen=True)
class FileShared:
    filename: str
    original_name: str
    size: int


@dataclass(frozen=True)
class TypingStarted:
    pass


@dataclass(frozen=True)
class TypingStopped:
    pass


InboundEvent = ChatMessageSent | FileShared | TypingStarted | TypingStopped


class ChatMessageSerializer(serializers.Serializer):
    message = serializers.CharField(trim_whitespace=False)

    def validate_message(self, value: str) -> str:
        limit = settings.CHAT_MESSAGE_MAX_LENGTH
        if len(value) > limit:
            msg = f"Ensure this field has no more than {limit} characters."
            raise serializers.ValidationError(msg)
        return value


class FileSharedSerializer(serializers.Serializer):
    filename = serializers.RegexField(r"^[A-Za-z0-9._-]+$", max_length=255)
    originalName = serializers.CharField(max_length=255)  # noqa: N815
    size = serializers.IntegerField(min_value=0)

    def validate_size(self, value: int) -> int:
        if value > settings.UPLOAD_MAX_BYTES:
            msg = f"Must be at most {settings.UPLOAD_MAX_BYTES} bytes"
            raise serializers.ValidationError(msg)
        return value

    def validate_filename(self, value: str) -> str:
        if value.strip(".") == "":
            msg = "Not a valid stored file name"
            raise serializers.ValidationError(msg)
        return value


def _validated(event: str, serializer_class, data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidEvent(event, {"non_field_errors": ["Expected an object"]})
    ser = serializer_class(data=data)
    if not ser.is_valid():
        raise InvalidEvent(event, ser.errors)
    return ser.validated_data


def parse_inbound(event: str, data: Any = None) -> InboundEvent:
    """Validate a client payload and return the matching event variant."""

    if event == CHAT_MESSAGE:
        validated = _validated(event, ChatMessageSerializer, data)
        return ChatMessageSent(message=validated["message"])
    if event == FILE_UPLOAD:
        validated = _validated(event, FileSharedSerializer, data)
        return FileShared(
            filename=validated["filename"],
            original_name=validated["originalName"],
            size=validated["size"],
        )
    if event == TYPING:
        return TypingStarted()
    if event == STOP_TYPING:
        return TypingStopped()
    raise InvalidEvent(event, {"non_field_errors": ["Unknown event"]})


# Outbound ------------------------------------------------------------------


@dataclass(frozen=True)
class PresenceChanged:
    event: str  # USER_JOINED or USER_LEFT
    username: str
    users: tuple[str, ...]
    timestamp: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "users": list(self.users),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ChatMessageBroadcast:
    event: ClassVar[str] = CHAT_MESSAGE

    id: str
    username: str
    ciphertext: str
    plaintext: str | None
    timestamp: str

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "username": self.username,
            "message": self.ciphertext,
        }
        if self.plaintext is not None:
            payload["originalMessage"] = self.plaintext
        payload["timestamp"] = self.timestamp
        payload["type"] = "text"
        return payload


@dataclass(frozen=True)
class FileNoticeBroadcast:
    event: ClassVar[str] = FILE_UPLOAD

    id: str
    username: str
    filename: str
    original_name: str
    size: int
    url: str
    timestamp: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "filename": self.filename,
            "originalName": self.original_name,
            "size": self.size,
            "url": self.url,
            "timestamp": self.timestamp,
            "type": "file",
        }


@dataclass(frozen=True)
class TypingSignal:
    event: str  # USER_TYPING or USER_STOP_TYPING
    username: str

    def to_payload(self) -> str:
        return self.username


@dataclass(frozen=True)
class EventRejected:
    event: ClassVar[str] = ERROR

    rejected: str
    errors: Any

    def to_payload(self) -> dict[str, Any]:
        return {"event": self.rejected, "errors": self.errors}


OutboundEvent = (
    PresenceChanged
    | ChatMessageBroadcast
    | FileNoticeBroadcast
    | TypingSignal
    | EventRejected
)
