from __future__ import annotations

import tempfile
from typing import Any

from django.conf import settings
from django.http import JsonResponse

from chathub.realtime.registry import registry


def check_storage() -> dict[str, Any]:
    try:
        with tempfile.NamedTemporaryFile(dir=settings.MEDIA_ROOT, prefix=".health-"):
            pass
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_realtime() -> dict[str, Any]:
    return {"ok": True, "participants": len(registry)}


def health(request):
    storage = check_storage()
    realtime = check_realtime()
    components = {"storage": storage, "realtime": realtime}

    all_ok = all(v.get("ok", False) for v in components.values())
    some_ok = any(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else ("degraded" if some_ok else "down")
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )
