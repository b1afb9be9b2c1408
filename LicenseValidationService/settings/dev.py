"""
Development settings for LicenseValidationService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Without Redis, run webhook deliveries inline
CELERY_TASK_ALWAYS_EAGER = os.environ.get("CELERY_TASK_ALWAYS_EAGER", "false").lower() == "true"

LOGGING = get_logging_config("development")

EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
