# cleanup_tracker/utils/timeutils.py
"""Naive-UTC clock helpers. All DateTime columns hold naive UTC values."""

import math
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded half up (may be negative)."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)
