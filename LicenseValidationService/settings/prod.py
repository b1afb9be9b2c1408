"""
Production settings for LicenseValidationService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")

# Security settings
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

if os.environ.get("LOG_FILE"):
    LOGGING["handlers"]["file"] = {  # noqa: F405
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.environ["LOG_FILE"],
        "maxBytes": 1024 * 1024 * 10,  # 10 MB
        "backupCount": 10,
        "formatter": "json",
    }
    LOGGING["root"]["handlers"].append("file")  # noqa: F405
