"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- The record store and service settings
- Middleware components
- Webhook delivery and health checks
"""
