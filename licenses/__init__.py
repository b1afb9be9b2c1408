"""
Licenses module - License management.

This module handles:
- License entity, capacities and evidence binding
- License lifecycle (issue, renew, status, delete)
- Sub-users and manual identity patches
"""
