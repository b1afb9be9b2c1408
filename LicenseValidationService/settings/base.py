"""
Base Django settings for LicenseValidationService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-5q!r0m8$lv@x2n#t7k9c^e1w4z&y6p3h(u)b-j_d+a=s%g*o"
)

DEBUG = False

ALLOWED_HOSTS = []

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core",
    "LicenseValidationService.apps.LicenseValidationServiceConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.AdminAPIKeyAuthenticationMiddleware",
]

ROOT_URLCONF = "LicenseValidationService.urls"

# API paths carry no trailing slash
APPEND_SLASH = False

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "LicenseValidationService.wsgi.application"
ASGI_APPLICATION = "LicenseValidationService.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Validation Service API",
    "DESCRIPTION": (
        "License validation and allocation engine. Provides the admin API for "
        "license, blacklist and statistics management and the public "
        "validation endpoint used by client software."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Admin API", "description": "License, blacklist and statistics management"},
        {"name": "Validation", "description": "Public license validation"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_ALWAYS_EAGER = False

# Record store
RECORD_STORE_BACKEND = os.environ.get(
    "RECORD_STORE_BACKEND",
    "core.infrastructure.repositories.django_record_store.DjangoRecordStore",
)
VALIDATION_LOG_RETENTION = int(os.environ.get("VALIDATION_LOG_RETENTION", "500"))
AUDIT_EVENT_RETENTION = int(os.environ.get("AUDIT_EVENT_RETENTION", "1000"))
COMMAND_LOG_RETENTION = int(os.environ.get("COMMAND_LOG_RETENTION", "1000"))

# Admin API key used until one is stored in the service settings
ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY", "")

# IP geolocation for validation logs
GEOLOCATION_ENABLED = os.environ.get("GEOLOCATION_ENABLED", "true").lower() == "true"
GEOLOCATION_URL = os.environ.get("GEOLOCATION_URL", "https://ipapi.co/{ip}/json/")
GEOLOCATION_TIMEOUT = float(os.environ.get("GEOLOCATION_TIMEOUT", "3.0"))
GEOLOCATION_CACHE_SECONDS = int(os.environ.get("GEOLOCATION_CACHE_SECONDS", "86400"))

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "production"))
