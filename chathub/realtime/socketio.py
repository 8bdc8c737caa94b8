"""Global Socket.IO server for chat clients.

Connection handlers live in ``chathub.realtime.handlers`` and are registered
when the app is ready; this module only owns the server instance and the
fan-out helpers, so publishers can import it without pulling in the router.

Client convention:
- URL base: ws://<host>:8000
- Socket.IO path: /socket.io/ (``SOCKETIO_PATH``)
- Auth: none, every connection gets a generated display name
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import socketio
from django.conf import settings

logger = logging.getLogger(__name__)


# async_handlers=False runs a connection's handlers inline on its reader task,
# so one client's events are handled in arrival order. Connections are never
# refused, so the CONNECT ack goes out before the join broadcast.
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
    async_handlers=False,
    always_connect=True,
    logger=False,
    engineio_logger=False,
)


async def _emit_to_sid(event: str, payload: Any, sid: str) -> bool:
    try:
        await sio.emit(event, payload, to=sid)
    except Exception:  # noqa: BLE001 - one bad recipient must not stop the rest
        logger.exception("Failed to deliver %r to %s", event, sid)
        return False
    return True


async def emit_to_sessions(event: str, payload: Any, sids: Iterable[str]) -> int:
    """Send ``event`` to each sid independently.

    Sends run concurrently and failures are logged per recipient. Returns the
    number of successful deliveries.
    """

    results = await asyncio.gather(
        *(_emit_to_sid(event, payload, sid) for sid in sids),
    )
    return sum(results)
