"""Rate limiter configuration for auth endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared across routers; tests call limiter.reset() between cases
limiter = Limiter(key_func=get_remote_address)
