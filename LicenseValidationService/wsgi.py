"""
WSGI config for LicenseValidationService.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseValidationService.settings.dev")

application = get_wsgi_application()
