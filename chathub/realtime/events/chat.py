from __future__ import annotations

from django.conf import settings

from chathub.realtime.codec import MessageCodec
from chathub.realtime.events import publish
from chathub.realtime.protocol import USER_STOP_TYPING
from chathub.realtime.protocol import USER_TYPING
from chathub.realtime.protocol import ChatMessageBroadcast
from chathub.realtime.protocol import TypingSignal
from chathub.realtime.protocol import iso_now
from chathub.realtime.protocol import next_event_id
from chathub.realtime.registry import RegistryView


def build_chat_message(
    username: str,
    text: str,
    codec: MessageCodec,
) -> ChatMessageBroadcast:
    return ChatMessageBroadcast(
        id=next_event_id(),
        username=username,
        ciphertext=codec.encrypt(text),
        plaintext=text if settings.CHAT_INCLUDE_PLAINTEXT else None,
        timestamp=iso_now(),
    )


async def publish_chat_message(
    username: str,
    text: str,
    codec: MessageCodec,
    view: RegistryView,
) -> ChatMessageBroadcast:
    """Encode ``text`` and send one identical message to every session, sender included."""

    message = build_chat_message(username, text, codec)
    await publish(message, view.sids)
    return message


async def publish_typing(
    username: str,
    sender_sid: str,
    view: RegistryView,
    *,
    typing: bool,
) -> TypingSignal:
    """Relay a typing start/stop to everyone but the sender."""

    signal = TypingSignal(
        event=USER_TYPING if typing else USER_STOP_TYPING,
        username=username,
    )
    targets = [sid for sid in view.sids if sid != sender_sid]
    await publish(signal, targets)
    return signal
