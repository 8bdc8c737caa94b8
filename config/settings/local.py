from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="dV7nQ1sLx4KcR9mTb2HwYe6PzJf0UaGi8NoXkEr3MlWqCtSvBdZy5IhFgOpAj1u",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# LOGGING
# ------------------------------------------------------------------------------
LOGGING["loggers"]["chathub"]["level"] = env(  # noqa: F405
    "CHATHUB_LOG_LEVEL",
    default="DEBUG",
)
