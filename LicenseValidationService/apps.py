"""
App configuration for the License Validation Service.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

# Management commands that never serve requests
SKIPPED_COMMANDS = ("migrate", "makemigrations", "collectstatic", "shell", "check", "createsuperuser")


class LicenseValidationServiceConfig(AppConfig):
    """Wires observability and event handlers once apps are loaded."""

    name = "LicenseValidationService"
    verbose_name = "License Validation Service"
    _initialized = False

    def ready(self):
        if len(sys.argv) > 1 and sys.argv[1] in SKIPPED_COMMANDS:
            return
        # Django's autoreloader imports the project twice; RUN_MAIN="false" is the watcher
        if os.environ.get("RUN_MAIN") == "false":
            return
        if LicenseValidationServiceConfig._initialized:
            return

        from core.infrastructure.event_handlers import register_event_handlers
        from core.instrumentation import setup_opentelemetry

        logger.info("Setting up observability...")
        setup_opentelemetry()
        register_event_handlers()
        LicenseValidationServiceConfig._initialized = True
        logger.info("Observability setup complete")
