"""
Celery configuration for background tasks.

Used for webhook delivery.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseValidationService.settings.dev")

app = Celery("LicenseValidationService")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks(["core"])
