import re

import pytest

from chathub.realtime.protocol import CHAT_MESSAGE
from chathub.realtime.protocol import FILE_UPLOAD
from chathub.realtime.protocol import STOP_TYPING
from chathub.realtime.protocol import TYPING
from chathub.realtime.protocol import ChatMessageBroadcast
from chathub.realtime.protocol import ChatMessageSent
from chathub.realtime.protocol import FileShared
from chathub.realtime.protocol import InvalidEvent
from chathub.realtime.protocol import TypingStarted
from chathub.realtime.protocol import TypingStopped
from chathub.realtime.protocol import iso_now
from chathub.realtime.protocol import next_event_id
from chathub.realtime.protocol import parse_inbound


def test_parse_chat_message():
    assert parse_inbound(CHAT_MESSAGE, {"message": " hi "}) == ChatMessageSent(" hi ")


@pytest.mark.parametrize(
    "data",
    [None, "hi", {}, {"message": ""}, {"message": None}, {"text": "hi"}],
)
def test_parse_chat_message_rejects_bad_payloads(data):
    with pytest.raises(InvalidEvent) as exc_info:
        parse_inbound(CHAT_MESSAGE, data)
    assert exc_info.value.event == CHAT_MESSAGE


def test_parse_chat_message_enforces_max_length(settings):
    settings.CHAT_MESSAGE_MAX_LENGTH = 5
    assert parse_inbound(CHAT_MESSAGE, {"message": "12345"}).message == "12345"
    with pytest.raises(InvalidEvent) as exc_info:
        parse_inbound(CHAT_MESSAGE, {"message": "123456"})
    assert "message" in exc_info.value.errors


def test_parse_file_upload():
    event = parse_inbound(
        FILE_UPLOAD,
        {"filename": "1700000000000-42.png", "originalName": "cat.png", "size": 10},
    )
    assert event == FileShared("1700000000000-42.png", "cat.png", 10)


@pytest.mark.parametrize(
    "data",
    [
        {"filename": "../etc/passwd", "originalName": "x", "size": 1},
        {"filename": "a/b.png", "originalName": "x", "size": 1},
        {"filename": "..", "originalName": "x", "size": 1},
        {"filename": "a.png", "originalName": "", "size": 1},
        {"filename": "a.png", "originalName": "x", "size": -1},
        {"filename": "a.png", "originalName": "x", "size": "big"},
        {"filename": "a.png", "originalName": "x"},
    ],
)
def test_parse_file_upload_rejects_bad_metadata(data):
    with pytest.raises(InvalidEvent):
        parse_inbound(FILE_UPLOAD, data)


def test_parse_file_upload_rejects_oversize(settings):
    settings.UPLOAD_MAX_BYTES = 100
    with pytest.raises(InvalidEvent) as exc_info:
        parse_inbound(FILE_UPLOAD, {"filename": "a.png", "originalName": "a", "size": 101})
    assert "size" in exc_info.value.errors


def test_parse_typing_ignores_payload():
    assert parse_inbound(TYPING) == TypingStarted()
    assert parse_inbound(TYPING, {"anything": 1}) == TypingStarted()
    assert parse_inbound(STOP_TYPING) == TypingStopped()


def test_parse_unknown_event():
    with pytest.raises(InvalidEvent):
        parse_inbound("shout", {"message": "hi"})


def test_event_ids_strictly_increase():
    ids = [int(next_event_id()) for _ in range(1000)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_iso_now_shape():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", iso_now())


def test_chat_payload_without_plaintext():
    message = ChatMessageBroadcast(
        id="1",
        username="User1234",
        ciphertext="Gww=",
        plaintext=None,
        timestamp="2026-10-17T09:30:00.123Z",
    )
    payload = message.to_payload()
    assert "originalMessage" not in payload
    assert payload["type"] == "text"
    assert payload["message"] == "Gww="
