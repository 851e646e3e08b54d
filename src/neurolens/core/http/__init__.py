"""
HTTP Client Utilities
=====================

Provides the HTTP client used to reach the classification service.

Features:
- Unified HTTP client with timeout and error mapping
- Retry with backoff for idempotent GET requests
"""

from .client import APIClient

__all__ = [
    "APIClient",
]
