"""Shared web infrastructure: slowapi rate limiter.

No imports from web.*, so every web module can import it.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

READ_LIMIT = "120/minute"
ACTION_LIMIT = "60/minute"
