"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in api/main.py (to mount as middleware) and in
api/routes/v1/auth.py (to apply per-route limits with @limiter.limit()).

A single shared instance keeps every route on the same in-memory counter
store; separate instances would each count in isolation and never trigger.

RATE_LIMIT_ENABLED=false turns every limit into a no-op (used by the test
suite, which registers and logs in far more often than a real client).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    enabled=get_settings().rate_limit_enabled,
)
