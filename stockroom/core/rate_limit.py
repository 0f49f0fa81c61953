"""
Shared slowapi limiter.

Lives outside ``stockroom.main`` so routers can decorate endpoints without
importing the application module.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from stockroom.core.config import get_settings

settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)
