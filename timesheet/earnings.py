from __future__ import annotations
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from core.clock import aware

CENT = Decimal("0.01")


def worked_window(ts, shift) -> tuple[datetime, datetime]:
    """Manager-approved times win, then the clock, then the planned shift window."""
    start = ts.manager_approved_start or ts.clock_in_time or shift.start_time
    end = ts.manager_approved_end or ts.clock_out_time or shift.end_time
    return aware(start), aware(end)


def worked_hours(ts, shift) -> Decimal:
    if ts.is_no_show:
        return Decimal("0.00")
    start, end = worked_window(ts, shift)
    minutes = (end - start).total_seconds() / 60
    if not shift.is_break_paid:
        minutes -= shift.break_minutes or 0
    minutes = max(minutes, 0)
    return (Decimal(str(minutes)) / Decimal(60)).quantize(CENT, rounding=ROUND_HALF_UP)


def total_pay(ts, shift) -> Decimal:
    rate = Decimal(str(shift.hourly_rate))
    return (worked_hours(ts, shift) * rate).quantize(CENT, rounding=ROUND_HALF_UP)
