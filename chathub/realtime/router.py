"""Per-connection chat state machine.

A connection is CONNECTED from the moment it is registered until the transport
closes, after which it is DISCONNECTED for good. Everything a connected client
sends is a self-transition that produces a broadcast.
"""

from __future__ import annotations

import enum
import logging

from chathub.realtime.codec import MessageCodec
from chathub.realtime.codec import get_codec
from chathub.realtime.events.chat import publish_chat_message
from chathub.realtime.events.chat import publish_typing
from chathub.realtime.events.presence import publish_user_joined
from chathub.realtime.events.presence import publish_user_left
from chathub.realtime.events.uploads import publish_file_notice
from chathub.realtime.protocol import ChatMessageSent
from chathub.realtime.protocol import FileShared
from chathub.realtime.protocol import InboundEvent
from chathub.realtime.protocol import TypingStarted
from chathub.realtime.protocol import TypingStopped
from chathub.realtime.registry import SessionRegistry

logger = logging.getLogger(__name__)


class ConnectionState(enum.Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class EventRouter:
    def __init__(self, registry: SessionRegistry, codec: MessageCodec | None = None):
        self.registry = registry
        self._codec = codec

    @property
    def codec(self) -> MessageCodec:
        return self._codec if self._codec is not None else get_codec()

    def state(self, sid: str) -> ConnectionState:
        if sid in self.registry:
            return ConnectionState.CONNECTED
        return ConnectionState.DISCONNECTED

    async def connect(self, sid: str) -> str:
        username = self.registry.register(sid)
        logger.info("User connected: %s as %s", sid, username)
        await publish_user_joined(username, self.registry.view())
        return username

    async def disconnect(self, sid: str) -> str | None:
        username = self.registry.unregister(sid)
        if username is None:
            return None
        logger.info("User disconnected: %s (%s)", sid, username)
        await publish_user_left(username, self.registry.view())
        return username

    async def dispatch(self, sid: str, event: InboundEvent) -> None:
        username = self.registry.lookup(sid)
        if username is None:
            logger.debug("Dropping %s from disconnected session %s", event, sid)
            return

        view = self.registry.view()
        if isinstance(event, ChatMessageSent):
            await publish_chat_message(username, event.message, self.codec, view)
        elif isinstance(event, FileShared):
            await publish_file_notice(
                username,
                event.filename,
                event.original_name,
                event.size,
                view,
            )
        elif isinstance(event, TypingStarted):
            await publish_typing(username, sid, view, typing=True)
        elif isinstance(event, TypingStopped):
            await publish_typing(username, sid, view, typing=False)
        else:
            msg = f"Unhandled event type: {type(event).__name__}"
            raise TypeError(msg)
