"""Chat-domain realtime publishers.

These modules contain *publish* helpers only (build event + emit).
They must not define Socket.IO server instances or connection handlers.
"""

from __future__ import annotations

from collections.abc import Iterable

from chathub.realtime.protocol import OutboundEvent
from chathub.realtime.socketio import emit_to_sessions


async def publish(event: OutboundEvent, sids: Iterable[str]) -> int:
    return await emit_to_sessions(event.event, event.to_payload(), sids)
