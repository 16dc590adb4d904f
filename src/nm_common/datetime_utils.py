"""UTC datetime utilities."""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def unix_now() -> float:
    """Wall-clock unix seconds (fractional), the time base of auction end times."""
    return time.time()
