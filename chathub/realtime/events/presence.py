from __future__ import annotations

from chathub.realtime.events import publish
from chathub.realtime.protocol import USER_JOINED
from chathub.realtime.protocol import USER_LEFT
from chathub.realtime.protocol import PresenceChanged
from chathub.realtime.protocol import iso_now
from chathub.realtime.registry import RegistryView


def build_presence_event(event: str, username: str, view: RegistryView) -> PresenceChanged:
    return PresenceChanged(
        event=event,
        username=username,
        users=view.users,
        timestamp=iso_now(),
    )


async def publish_user_joined(username: str, view: RegistryView) -> PresenceChanged:
    """Announce ``username`` to everyone in ``view``, the newcomer included."""

    presence = build_presence_event(USER_JOINED, username, view)
    await publish(presence, view.sids)
    return presence


async def publish_user_left(username: str, view: RegistryView) -> PresenceChanged:
    presence = build_presence_event(USER_LEFT, username, view)
    await publish(presence, view.sids)
    return presence
