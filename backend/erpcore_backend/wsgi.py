"""WSGI entry point for the erpcore backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "erpcore_backend.settings")

application = get_wsgi_application()
