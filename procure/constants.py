"""
Procure Cache Global Constants

Centralized location for all system-wide constants used across the application.
"""

import time

# Cache key layout
KEY_SEPARATOR = ":"
DETAIL_QUALIFIERS = frozenset({"DETAILS", "DETAIL"})
MAX_KEY_LENGTH = 1024
MAX_INLINE_PARAMS_LENGTH = 200
HASHED_SEGMENT_PREFIX = "#"


def monotonic_clock() -> float:
    """Default clock for in-process expiry bookkeeping.

    Note: Redis expires entries server side; this clock only drives the
    in-memory store.
    """
    return time.monotonic()


# Application Constants
APP_NAME = "Procure Cache"
APP_VERSION = "1.0.0"
