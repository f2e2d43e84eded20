"""
ASGI middleware for the CRM API.
"""

from .request_id import RequestIDMiddleware
from .response_cache import CacheInvalidationMiddleware, CachingSend, ResponseCacheMiddleware

__all__ = [
    "CacheInvalidationMiddleware",
    "CachingSend",
    "RequestIDMiddleware",
    "ResponseCacheMiddleware",
]
