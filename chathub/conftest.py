from pathlib import Path

import pytest

from chathub.realtime import socketio as realtime_socketio
from chathub.realtime.codec import get_codec
from chathub.realtime.registry import registry
from chathub.realtime.tests.recorders import EmitRecorder


@pytest.fixture(autouse=True)
def _media_storage(settings, tmp_path):
    media = Path(tmp_path) / "media"
    media.mkdir()
    settings.MEDIA_ROOT = str(media)


@pytest.fixture(autouse=True)
def _clean_realtime_state():
    registry.clear()
    get_codec.cache_clear()
    yield
    registry.clear()
    get_codec.cache_clear()


@pytest.fixture
def emitted(monkeypatch) -> EmitRecorder:
    recorder = EmitRecorder()
    monkeypatch.setattr(realtime_socketio.sio, "emit", recorder)
    return recorder
