"""
Base settings to build other settings files upon.
"""
from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent.parent
# finboard/
APPS_DIR = BASE_DIR / "finboard"

env = environ.Env()

env.read_env(str(BASE_DIR / ".env"))

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = env.bool("DJANGO_DEBUG", False)
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"
USE_I18N = True
USE_TZ = True

# DATABASES
# ------------------------------------------------------------------------------
# no models of our own; only the contrib apps DRF depends on use the database
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    ),
}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# URLS
# ------------------------------------------------------------------------------
ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
]
THIRD_PARTY_APPS = [
    "rest_framework",
    "drf_spectacular",
]

LOCAL_APPS = [
    "finboard.widgets",
    "finboard.portfolio",
]
INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# MIDDLEWARE
# ------------------------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# STATIC
# ------------------------------------------------------------------------------
STATIC_ROOT = str(BASE_DIR / "staticfiles")
STATIC_URL = "/static/"

# TEMPLATES
# ------------------------------------------------------------------------------
# only used by the browsable API and the swagger page
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.template.context_processors.static",
            ],
        },
    }
]

# SECURITY
# ------------------------------------------------------------------------------
X_FRAME_OPTIONS = "DENY"

# LOGGING
# ------------------------------------------------------------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "django.security.DisallowedHost": {
            "handlers": ["null"],
            "propagate": False,
        },
        "finboard": {
            "handlers": ["console"],
            "level": env("FINBOARD_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
    },
}

# django-rest-framework
# -------------------------------------------------------------------------------
# the dashboard is a single-user tool with no accounts
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.AllowAny",),
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Finboard API",
    "DESCRIPTION": "Finance dashboard: API-bound widgets and portfolio tracking",
    "VERSION": "1.0.0",
}

CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": env("REDIS_URL", default="redis://localhost:6379/0"),
        "OPTIONS": {
            "CLIENT_CLASS": "django_redis.client.DefaultClient",
        },
    }
}

# ------------------------------------------------------------------------------
# Finboard Settings...
# ------------------------------------------------------------------------------

# Widgets
WIDGET_CACHE_TTL = env.int("WIDGET_CACHE_TTL", default=60)
WIDGET_CACHE_MAX_ENTRIES = env.int("WIDGET_CACHE_MAX_ENTRIES", default=500)
WIDGET_PROXY_TIMEOUT = env.float("WIDGET_PROXY_TIMEOUT", default=10)
WIDGET_PROXY_USER_AGENT = env("WIDGET_PROXY_USER_AGENT", default="Finance-Dashboard/1.0")
WIDGET_CURRENCY_SYMBOL = env("WIDGET_CURRENCY_SYMBOL", default="₹")
# lakh/crore grouping: 12,34,567
WIDGET_NUMBER_GROUPING = (3, 2, 0)

# cache alias holding the dashboard layout; must not evict
DASHBOARD_STATE_CACHE = "default"

# Portfolio
PORTFOLIO_CACHE_TTL = env.int("PORTFOLIO_CACHE_TTL", default=30)
PORTFOLIO_CACHE_MAX_ENTRIES = env.int("PORTFOLIO_CACHE_MAX_ENTRIES", default=100)
PORTFOLIO_UPDATE_INTERVAL = env.int("PORTFOLIO_UPDATE_INTERVAL", default=15)
