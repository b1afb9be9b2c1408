"""
Django admin configuration for the record store.

Collections are read-only here; every write goes through the record
store so its per-collection atomicity holds.
"""
from django.contrib import admin

from core.infrastructure.models import StoredCollection


@admin.register(StoredCollection)
class StoredCollectionAdmin(admin.ModelAdmin):
    """Admin interface for StoredCollection model."""

    list_display = ["name", "record_count", "updated_at"]
    search_fields = ["name"]
    readonly_fields = ["name", "records", "updated_at"]

    def record_count(self, obj):
        return len(obj.records or [])

    record_count.short_description = "Records"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
