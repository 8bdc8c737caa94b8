import logging

from django.conf import settings
from django.views.static import serve
from drf_spectacular.utils import extend_schema
from rest_framework import permissions
from rest_framework import status
from rest_framework.parsers import FormParser
from rest_framework.parsers import MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from chathub.uploads.storage import UploadRejected
from chathub.uploads.storage import store_upload

from .serializers import UploadErrorSerializer
from .serializers import UploadResponseSerializer

logger = logging.getLogger(__name__)

REJECTION_RESPONSES = {
    UploadRejected.MISSING: ("No file uploaded", status.HTTP_400_BAD_REQUEST),
    UploadRejected.TYPE_NOT_ALLOWED: (
        "File type not allowed",
        status.HTTP_400_BAD_REQUEST,
    ),
    UploadRejected.TOO_LARGE: (
        "File too large",
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ),
}


class FileUploadView(APIView):
    """Stores a chat attachment and returns where to fetch it.

    The client then emits a ``file upload`` Socket.IO event with the returned
    ``filename``/``originalName``/``size`` so the file shows up in the chat.
    """

    permission_classes = [permissions.AllowAny]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        tags=["Uploads"],
        request={
            "multipart/form-data": {
                "type": "object",
                "properties": {"file": {"type": "string", "format": "binary"}},
                "required": ["file"],
            }
        },
        responses={
            200: UploadResponseSerializer,
            400: UploadErrorSerializer,
            413: UploadErrorSerializer,
            500: UploadErrorSerializer,
        },
    )
    def post(self, request):
        try:
            stored = store_upload(request.FILES.get("file"))
        except UploadRejected as exc:
            error, http_status = REJECTION_RESPONSES[exc.reason]
            logger.info("Upload rejected (%s): %s", exc.reason, exc.detail)
            body = {"error": error}
            if exc.reason != UploadRejected.MISSING:
                body["detail"] = exc.detail
            return Response(body, status=http_status)
        except Exception:  # noqa: BLE001 - storage failures must not leak detail
            logger.exception("Upload failed")
            return Response(
                {"error": "Upload failed"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(stored.to_response(), status=status.HTTP_200_OK)


def serve_upload(request, path):
    """Serve a stored attachment straight from ``MEDIA_ROOT``."""

    return serve(request, path, document_root=settings.MEDIA_ROOT)
