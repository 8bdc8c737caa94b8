"""
With these settings, tests run faster.
"""

import tempfile
from pathlib import Path

from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="kQ2v8Jt0mZc4HfXr6pWb1NdLs9YgEa3TuIo7RnVe5KyMhCxBqUzGlOjPwFiDsA0",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"

# DEBUGGING FOR TEMPLATES
# ------------------------------------------------------------------------------
TEMPLATES[0]["OPTIONS"]["debug"] = True  # type: ignore[index]  # noqa: F405

# MEDIA
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#media-root
MEDIA_ROOT = str(Path(tempfile.gettempdir()) / "chathub-test-media")

# CHAT
# ------------------------------------------------------------------------------
CHAT_CODEC_KEY = "secret-key-123"
# Your stuff...
# ------------------------------------------------------------------------------
