import re

from django.conf import settings
from django.urls import include
from django.urls import path
from django.urls import re_path
from drf_spectacular.views import SpectacularAPIView
from drf_spectacular.views import SpectacularSwaggerView

from chathub.uploads.api.views import serve_upload

from .health import health as health_view

MEDIA_PREFIX = re.escape(settings.MEDIA_URL.lstrip("/"))

urlpatterns = [
    path("health/", health_view, name="health"),
    # Upload boundary: POST /upload (multipart field "file")
    path("", include("chathub.uploads.api.urls")),
    # Stored attachments, served flat as /uploads/<stored name>
    re_path(
        rf"^{MEDIA_PREFIX}(?P<path>[^/]+)$",
        serve_upload,
        name="uploaded-file",
    ),
    # schema/docs
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="api-schema"),
        name="api-docs",
    ),
]
