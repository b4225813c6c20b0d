"""
Rate Limit

Limitation de débit par fenêtre fixe (un seul processus).
"""

from .interfaces import IRateLimitStore, RateLimitEntry, RateLimitResult
from .memory_store import InMemoryRateLimitStore
from .rate_limiter import RateLimiter

__all__ = [
    "IRateLimitStore",
    "RateLimitEntry",
    "RateLimitResult",
    "InMemoryRateLimitStore",
    "RateLimiter",
]
