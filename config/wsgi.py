"""
WSGI config for Finboard.

Exposes the module-level ``application`` that Django's ``runserver`` and
production WSGI servers discover through the ``WSGI_APPLICATION`` setting.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

application = get_wsgi_application()
