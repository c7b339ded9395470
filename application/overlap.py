from __future__ import annotations
from datetime import datetime

from core.clock import aware


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open window test: [a_start, a_end) and [b_start, b_end) share an instant.

    Windows that only touch (a_end == b_start) do not overlap. Naive values are
    read as UTC so rows coming back from SQLite compare against aware ones.
    """
    return aware(a_start) < aware(b_end) and aware(a_end) > aware(b_start)


def shifts_overlap(a, b) -> bool:
    return overlaps(a.start_time, a.end_time, b.start_time, b.end_time)
