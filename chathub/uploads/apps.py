from pathlib import Path

from django.apps import AppConfig
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class UploadsConfig(AppConfig):
    name = "chathub.uploads"
    verbose_name = _("Uploads")

    def ready(self):
        # Create the uploads directory if it doesn't exist
        Path(settings.MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
