from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = True
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="q3Wm8vJf2HkR7cXn0LpT5sYb9GdE1uZa4NiO6rVwKeQyBhMxCtSjUlDgFoPzAI2n",
)
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"] + env.list("DJANGO_ALLOWED_HOSTS", default=[])

# CACHES
# ------------------------------------------------------------------------------
# run without redis unless REDIS_URL is set
if not env("REDIS_URL", default=None):
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "finboard-local",
            "TIMEOUT": None,
        }
    }

# Finboard
# ------------------------------------------------------------------------------
LOGGING["loggers"]["finboard"]["level"] = "DEBUG"  # noqa: F405
