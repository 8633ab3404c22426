"""
JobTrack - Centralized rate limiting configuration.

All rate limit decorators should import `limiter` from this module.
The limiter keys on client IP address.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# --- Rate limit constants ---

# Job posting scrape (slow upstream call), strictest
RATE_LIMIT_SCRAPE = "5/minute"

# Write operations forwarded to the tracker API (create, update, delete), moderate
RATE_LIMIT_GENERAL = "30/minute"

# Read-heavy views (calendar month, dashboard), generous (1/sec sustained)
RATE_LIMIT_READ = "60/minute"
