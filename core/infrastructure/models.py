"""
StoredCollection model.

One row per record-store collection. The whole collection lives in a JSON
column and is always replaced as a unit.
"""
from django.db import models


class StoredCollection(models.Model):
    """A named, ordered list of JSON records."""

    name = models.CharField(max_length=100, primary_key=True)
    records = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "record_collections"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({len(self.records)} records)"
