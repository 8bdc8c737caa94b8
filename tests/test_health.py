from http import HTTPStatus
from unittest import mock

from chathub.realtime.registry import registry


def test_health_ok(client, settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["components"]["storage"]["ok"] is True
    assert data["components"]["realtime"]["ok"] is True


def test_health_reports_participants(client, settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    registry.clear()
    registry.register("health-a")
    registry.register("health-b")
    try:
        data = client.get("/health/").json()
    finally:
        registry.clear()
    assert data["components"]["realtime"]["participants"] == 2  # noqa: PLR2004


def test_health_degraded_when_storage_missing(client, settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "missing" / "dir")
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["storage"]["ok"] is False
    assert data["status"] == "degraded"


def test_health_down_when_everything_fails(client, settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "missing")
    with mock.patch(
        "config.health.check_realtime",
        return_value={"ok": False, "error": "socket server stopped"},
    ):
        resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert resp.json()["status"] == "down"
