"""
With these settings, tests run faster.
"""

from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Xc7Tn2Rb5Lq9WsJ0YdK3HvM8PfG1ZaE6UoB4NiQtCrSlDwFyAeIjOgVmKhPuTxL",
)
TEST_RUNNER = "django.test.runner.DiscoverRunner"

# CACHES
# ------------------------------------------------------------------------------
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "finboard-test",
        "TIMEOUT": None,
    }
}

# outbound calls are mocked with pytest-httpx; keep the timeout short anyway
WIDGET_PROXY_TIMEOUT = 2
