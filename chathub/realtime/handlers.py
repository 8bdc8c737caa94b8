"""Socket.IO connection and event handlers.

Imported from ``RealtimeConfig.ready()`` so the handlers are attached to
``sio`` once Django is set up.
"""

from __future__ import annotations

import logging
from typing import Any

from chathub.realtime.events import publish
from chathub.realtime.protocol import CHAT_MESSAGE
from chathub.realtime.protocol import FILE_UPLOAD
from chathub.realtime.protocol import STOP_TYPING
from chathub.realtime.protocol import TYPING
from chathub.realtime.protocol import EventRejected
from chathub.realtime.protocol import InvalidEvent
from chathub.realtime.protocol import parse_inbound
from chathub.realtime.registry import registry
from chathub.realtime.router import EventRouter
from chathub.realtime.socketio import sio

logger = logging.getLogger(__name__)

router = EventRouter(registry)


async def _route(sid: str, event: str, data: Any = None) -> None:
    try:
        inbound = parse_inbound(event, data)
    except InvalidEvent as exc:
        logger.warning("Rejected %r from %s: %s", event, sid, exc.errors)
        rejected = EventRejected(rejected=exc.event, errors=exc.errors)
        await publish(rejected, [sid])
        return
    await router.dispatch(sid, inbound)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    await router.connect(sid)


@sio.event
async def disconnect(sid: str, reason: Any | None = None):
    await router.disconnect(sid)


@sio.on(CHAT_MESSAGE)
async def chat_message(sid: str, data: Any = None):
    await _route(sid, CHAT_MESSAGE, data)


@sio.on(FILE_UPLOAD)
async def file_upload(sid: str, data: Any = None):
    await _route(sid, FILE_UPLOAD, data)


@sio.on(TYPING)
async def typing(sid: str, *args: Any):
    await _route(sid, TYPING)


@sio.on(STOP_TYPING)
async def stop_typing(sid: str, *args: Any):
    await _route(sid, STOP_TYPING)
