from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from core.clock import aware, utcnow
from core.config_loader import settings
from account.models import Role


@dataclass(frozen=True)
class CancellationClass:
    is_upcoming: bool
    is_late: bool


@dataclass(frozen=True)
class Consequence:
    kind: str  # "fee" | "ban" | "none"
    message: str
    fee_amount: Optional[int] = None
    currency: Optional[str] = None
    ban_days: Optional[int] = None


def classify_cancellation(shift_start_time: datetime, now: Optional[datetime] = None) -> CancellationClass:
    """Late means the shift is still ahead but starts in less than the threshold (24h)."""
    now = aware(now) if now is not None else utcnow()
    start = aware(shift_start_time)
    upcoming = start > now
    threshold = timedelta(hours=settings.LATE_CANCELLATION_THRESHOLD_HOURS)
    return CancellationClass(is_upcoming=upcoming, is_late=upcoming and (start - now) < threshold)


def cancellation_consequence(role: Role, cls: CancellationClass) -> Consequence:
    # Warning text only; nothing here charges a fee or bans anyone.
    if not cls.is_late:
        return Consequence(kind="none", message="Cancellation is free of charge")

    match role:
        case Role.company | Role.admin:
            return Consequence(
                kind="fee",
                message=(
                    f"Late cancellation: a fee of {settings.LATE_CANCELLATION_FEE} "
                    f"{settings.CURRENCY} applies"
                ),
                fee_amount=settings.LATE_CANCELLATION_FEE,
                currency=settings.CURRENCY,
            )
        case Role.worker:
            return Consequence(
                kind="ban",
                message=f"Late cancellation: your account may be suspended for {settings.WORKER_BAN_DAYS} days",
                ban_days=settings.WORKER_BAN_DAYS,
            )
    raise ValueError(f"unknown role: {role!r}")
