"""End-to-end behaviour of the Socket.IO handlers against a recorded ``sio.emit``."""

import re

from asgiref.sync import async_to_sync

from chathub.realtime import handlers
from chathub.realtime.codec import decrypt
from chathub.realtime.registry import registry
from chathub.realtime.router import ConnectionState
from chathub.realtime.tests.recorders import EmitRecorder

KEY = "secret-key-123"


def connect(sid):
    async_to_sync(handlers.connect)(sid, {})
    return registry.lookup(sid)


def disconnect(sid):
    async_to_sync(handlers.disconnect)(sid)


def send(handler, sid, *args):
    async_to_sync(handler)(sid, *args)


def test_join_chat_leave_scenario(emitted):
    name_a = connect("a")
    assert re.fullmatch(r"User\d{4}", name_a)
    [joined] = emitted.received("a", "user joined")
    assert joined["username"] == name_a
    assert joined["users"] == [name_a]

    emitted.clear()
    name_b = connect("b")
    for sid in ("a", "b"):
        [joined] = emitted.received(sid, "user joined")
        assert joined["username"] == name_b
        assert joined["users"] == [name_a, name_b]

    emitted.clear()
    send(handlers.chat_message, "a", {"message": "hi"})
    for sid in ("a", "b"):
        [message] = emitted.received(sid, "chat message")
        assert message["username"] == name_a
        assert decrypt(message["message"], KEY) == "hi"
        assert message["originalMessage"] == "hi"
        assert message["type"] == "text"

    emitted.clear()
    disconnect("b")
    [left] = emitted.received("a", "user left")
    assert left["username"] == name_b
    assert left["users"] == [name_a]
    assert emitted.received("b") == []


def test_chat_message_delivered_once_to_every_connection(emitted):
    sids = ["a", "b", "c", "d"]
    for sid in sids:
        connect(sid)
    emitted.clear()

    send(handlers.chat_message, "b", {"message": "hello all"})

    assert sorted(emitted.recipients("chat message")) == sorted(sids)
    deliveries = [emitted.received(sid, "chat message")[0] for sid in sids]
    assert len({d["id"] for d in deliveries}) == 1
    assert len({d["timestamp"] for d in deliveries}) == 1


def test_chat_message_ids_differ_between_messages(emitted):
    connect("a")
    send(handlers.chat_message, "a", {"message": "one"})
    send(handlers.chat_message, "a", {"message": "two"})
    ids = [m["id"] for m in emitted.received("a", "chat message")]
    assert len(ids) == 2  # noqa: PLR2004
    assert int(ids[1]) > int(ids[0])


def test_plaintext_can_be_withheld(emitted, settings):
    settings.CHAT_INCLUDE_PLAINTEXT = False
    connect("a")
    send(handlers.chat_message, "a", {"message": "hi"})
    [message] = emitted.received("a", "chat message")
    assert "originalMessage" not in message
    assert decrypt(message["message"], KEY) == "hi"


def test_typing_signals_skip_sender(emitted):
    name_a = connect("a")
    connect("b")
    connect("c")
    emitted.clear()

    send(handlers.typing, "a")
    assert sorted(emitted.recipients("user typing")) == ["b", "c"]
    assert emitted.received("b", "user typing") == [name_a]

    send(handlers.stop_typing, "a")
    assert sorted(emitted.recipients("user stop typing")) == ["b", "c"]
    assert emitted.received("c", "user stop typing") == [name_a]


def test_file_upload_notice_broadcast(emitted):
    name_a = connect("a")
    connect("b")
    emitted.clear()

    send(
        handlers.file_upload,
        "a",
        {"filename": "1700000000000-1.pdf", "originalName": "report.pdf", "size": 2048},
    )

    for sid in ("a", "b"):
        [notice] = emitted.received(sid, "file upload")
        assert notice["username"] == name_a
        assert notice["filename"] == "1700000000000-1.pdf"
        assert notice["originalName"] == "report.pdf"
        assert notice["size"] == 2048  # noqa: PLR2004
        assert notice["url"] == "/uploads/1700000000000-1.pdf"
        assert notice["type"] == "file"


def test_invalid_payload_only_answers_sender(emitted):
    connect("a")
    connect("b")
    emitted.clear()

    send(handlers.chat_message, "a", {"message": ""})
    send(handlers.file_upload, "a", {"filename": "../x", "originalName": "x", "size": 1})

    assert emitted.recipients("chat message") == []
    assert emitted.recipients("file upload") == []
    errors = emitted.received("a", "error")
    assert [e["event"] for e in errors] == ["chat message", "file upload"]
    assert "message" in errors[0]["errors"]
    assert emitted.received("b") == []
    assert len(registry) == 2  # noqa: PLR2004


def test_events_after_disconnect_are_dropped(emitted):
    connect("a")
    connect("b")
    disconnect("a")
    emitted.clear()

    send(handlers.chat_message, "a", {"message": "ghost"})
    send(handlers.typing, "a")

    assert emitted.sent == []


def test_disconnect_twice_announces_once(emitted):
    connect("a")
    connect("b")
    emitted.clear()

    disconnect("b")
    disconnect("b")

    assert emitted.recipients("user left") == ["a"]


def test_failed_recipient_does_not_block_others(monkeypatch):
    recorder = EmitRecorder(fail_for={"b"})
    monkeypatch.setattr(handlers.sio, "emit", recorder)

    connect("a")
    connect("b")
    connect("c")
    recorder.clear()

    send(handlers.chat_message, "a", {"message": "still here"})

    assert sorted(recorder.recipients("chat message")) == ["a", "c"]
    assert len(registry) == 3  # noqa: PLR2004


def test_connection_state(emitted):
    assert handlers.router.state("a") is ConnectionState.DISCONNECTED
    connect("a")
    assert handlers.router.state("a") is ConnectionState.CONNECTED
    disconnect("a")
    assert handlers.router.state("a") is ConnectionState.DISCONNECTED


def test_messages_from_one_connection_arrive_in_order(emitted):
    connect("a")
    connect("b")
    connect("c")
    emitted.clear()

    for text in ("one", "two", "three"):
        send(handlers.chat_message, "a", {"message": text})
    send(handlers.chat_message, "b", {"message": "from b"})

    for sid in ("a", "b", "c"):
        texts = [m["originalMessage"] for m in emitted.received(sid, "chat message")]
        assert texts == ["one", "two", "three", "from b"]
