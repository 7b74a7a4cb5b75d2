"""Middleware package."""
from eventdesk.middleware.rate_limit import limiter, rate_limit_key, setup_rate_limiting

__all__ = ["limiter", "rate_limit_key", "setup_rate_limiting"]
