"""
Rate limiting (slowapi).

Counters live in Redis when ``redis_enabled`` so that every API process
shares one budget per client; otherwise they are kept in memory.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from src.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.redis_url if settings.redis_enabled else "memory://",
    enabled=settings.rate_limit_enabled,
)
