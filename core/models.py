"""
Core models.

Models live in core.infrastructure.models; importing them here registers
them with the "core" app.
"""
from core.infrastructure.models import StoredCollection  # noqa: F401
