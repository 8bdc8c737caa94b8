from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RealtimeConfig(AppConfig):
    name = "chathub.realtime"
    verbose_name = _("Realtime")

    def ready(self):
        import chathub.realtime.handlers  # noqa: F401, PLC0415
