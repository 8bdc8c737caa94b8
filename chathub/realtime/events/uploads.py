from __future__ import annotations

from chathub.realtime.events import publish
from chathub.realtime.protocol import FileNoticeBroadcast
from chathub.realtime.protocol import iso_now
from chathub.realtime.protocol import next_event_id
from chathub.realtime.registry import RegistryView
from chathub.uploads.storage import url_for


def build_file_notice(
    username: str,
    filename: str,
    original_name: str,
    size: int,
) -> FileNoticeBroadcast:
    return FileNoticeBroadcast(
        id=next_event_id(),
        username=username,
        filename=filename,
        original_name=original_name,
        size=size,
        url=url_for(filename),
        timestamp=iso_now(),
    )


async def publish_file_notice(
    username: str,
    filename: str,
    original_name: str,
    size: int,
    view: RegistryView,
) -> FileNoticeBroadcast:
    """Share an already stored file with every session as a chat entry.

    The bytes were written by the upload endpoint; this only relays metadata.
    """

    notice = build_file_notice(username, filename, original_name, size)
    await publish(notice, view.sids)
    return notice
