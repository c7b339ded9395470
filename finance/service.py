from __future__ import annotations
from decimal import Decimal
from typing import Optional, Iterable

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from core.clock import aware
from core.config_loader import settings
from timesheet.models import Timesheet, TimesheetStatus
from timesheet.earnings import total_pay
from .models import Payment, PaymentStatus
from .schema import CompanyFinances, FinanceSummary, PaymentSchema, WorkerEarnings

EARNING_STATUSES = (TimesheetStatus.approved, TimesheetStatus.paid)


def get_company_finances(db: Session, *, company_id: str) -> CompanyFinances:
    pending = db.scalar(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.company_id == company_id,
            Payment.status == PaymentStatus.pending,
        )
    )
    rows = db.scalars(
        select(Payment)
        .where(Payment.company_id == company_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
    )
    transactions = [
        PaymentSchema.model_validate(p).model_copy(update={"currency": settings.CURRENCY})
        for p in rows
    ]
    return CompanyFinances(
        summary=FinanceSummary(total_pending=Decimal(str(pending or 0)), currency=settings.CURRENCY),
        transactions=transactions,
    )


def calculate_all_time_earnings(timesheets: Iterable[Timesheet]) -> Decimal:
    return sum(
        (total_pay(ts, ts.shift) for ts in timesheets if ts.status in EARNING_STATUSES),
        Decimal("0.00"),
    )


def calculate_monthly_earnings(timesheets: Iterable[Timesheet], year: int, month: int) -> Decimal:
    """month is 1-12."""
    total = Decimal("0.00")
    for ts in timesheets:
        if ts.status not in EARNING_STATUSES:
            continue
        start = aware(ts.shift.start_time)
        if start.year == year and start.month == month:
            total += total_pay(ts, ts.shift)
    return total


def get_worker_earnings(
    db: Session,
    *,
    worker_id: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> WorkerEarnings:
    timesheets = list(db.scalars(select(Timesheet).where(Timesheet.worker_id == worker_id)))
    monthly = None
    if year is not None and month is not None:
        monthly = calculate_monthly_earnings(timesheets, year, month)
    return WorkerEarnings(
        all_time=calculate_all_time_earnings(timesheets),
        monthly=monthly,
        year=year,
        month=month,
        currency=settings.CURRENCY,
    )
