from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.clock import aware, utcnow
from core.errors import NotFound, Unauthorized, ValidationError, Conflict, PersistenceError
from application.models import ShiftApplication, ApplicationStatus
from account.models import Profile
from finance.models import Payment, PaymentStatus
from shift.models import Shift, ShiftStatus
from .models import Timesheet, TimesheetStatus
from .schema import TimesheetUpdate
from .earnings import worked_hours, total_pay

log = logging.getLogger("shiftmarket.timesheet")

LOCKED = (TimesheetStatus.approved, TimesheetStatus.paid)


@dataclass
class Approval:
    timesheet: Timesheet
    payment_created: bool
    message: str


def get_timesheet_for_company(db: Session, timesheet_id: int, company_id: str) -> Timesheet | None:
    stmt = select(Timesheet).where(Timesheet.id == timesheet_id, Timesheet.company_id == company_id)
    return db.scalars(stmt).first()


def get_company_timesheets(
    db: Session,
    *,
    company_id: str,
    shift_id: Optional[int] = None,
    status: Optional[TimesheetStatus] = None,
) -> List[Timesheet]:
    stmt = select(Timesheet).where(Timesheet.company_id == company_id)
    if shift_id is not None:
        stmt = stmt.where(Timesheet.shift_id == shift_id)
    if status is not None:
        stmt = stmt.where(Timesheet.status == status)
    stmt = stmt.order_by(Timesheet.created_at.desc(), Timesheet.id.desc())
    return list(db.scalars(stmt))


def get_worker_timesheets(db: Session, *, worker_id: str, now: Optional[datetime] = None) -> List[Timesheet]:
    """Timesheets of shifts that already started, newest shift first. No-shows are left out."""
    now = aware(now) if now is not None else utcnow()
    stmt = (
        select(Timesheet)
        .join(Shift, Shift.id == Timesheet.shift_id)
        .where(
            Timesheet.worker_id == worker_id,
            Timesheet.is_no_show.is_(False),
            Shift.start_time < now,
        )
        .order_by(Shift.start_time.desc(), Timesheet.id.desc())
    )
    return list(db.scalars(stmt).unique())


def _accepted_application(db: Session, shift_id: int, worker_id: str) -> ShiftApplication | None:
    stmt = select(ShiftApplication).where(
        ShiftApplication.shift_id == shift_id,
        ShiftApplication.worker_id == worker_id,
        ShiftApplication.status == ApplicationStatus.accepted,
    )
    return db.scalars(stmt).first()


def clock_in(db: Session, *, worker_id: str, shift_id: int, now: Optional[datetime] = None) -> Timesheet:
    now = aware(now) if now is not None else utcnow()
    shift = db.get(Shift, shift_id)
    if not shift:
        raise NotFound("Shift not found")
    if shift.status == ShiftStatus.cancelled:
        raise Conflict("Shift was cancelled")
    if not _accepted_application(db, shift_id, worker_id):
        raise Unauthorized("You are not booked on this shift")

    row = db.scalars(
        select(Timesheet).where(Timesheet.shift_id == shift_id, Timesheet.worker_id == worker_id)
    ).first()
    if row is None:
        row = Timesheet(shift_id=shift_id, worker_id=worker_id, company_id=shift.company_id)
        db.add(row)
    elif row.clock_in_time is not None:
        raise Conflict("Already clocked in")

    row.clock_in_time = now
    db.commit()
    db.refresh(row)
    return row


def clock_out(db: Session, *, worker_id: str, shift_id: int, now: Optional[datetime] = None) -> Timesheet:
    now = aware(now) if now is not None else utcnow()
    row = db.scalars(
        select(Timesheet).where(Timesheet.shift_id == shift_id, Timesheet.worker_id == worker_id)
    ).first()
    if not row or row.clock_in_time is None:
        raise Conflict("Clock in first")
    if row.clock_out_time is not None:
        raise Conflict("Already clocked out")
    if now <= aware(row.clock_in_time):
        raise ValidationError("clock out must be after clock in")

    row.clock_out_time = now
    db.commit()
    db.refresh(row)
    return row


def update_timesheet(db: Session, timesheet_id: int, patch: TimesheetUpdate, *, company_id: str) -> Timesheet:
    row = get_timesheet_for_company(db, timesheet_id, company_id)
    if not row:
        raise NotFound("Timesheet not found")
    if row.status in LOCKED:
        raise Conflict("Approved timesheets cannot be changed")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    start = data.get("manager_approved_start", row.manager_approved_start)
    end = data.get("manager_approved_end", row.manager_approved_end)
    if start is not None and end is not None and aware(end) <= aware(start):
        raise ValidationError("manager_approved_end must be after manager_approved_start")

    for k, v in data.items():
        if k == "status":
            v = TimesheetStatus(v)
        setattr(row, k, v)

    db.commit()
    db.refresh(row)
    return row


def approve_timesheet(db: Session, timesheet_id: int, *, company_id: str) -> Approval:
    """Approve a timesheet and create its payment.

    Safe to call twice: when a payment already exists for the hired
    application only the timesheet status is updated.
    """
    row = db.get(Timesheet, timesheet_id)
    if not row:
        raise NotFound("Timesheet not found")
    if row.company_id != company_id:
        raise Unauthorized()

    app = _accepted_application(db, row.shift_id, row.worker_id)
    if not app:
        raise NotFound("Application not found for this timesheet")

    existing = db.scalars(select(Payment.id).where(Payment.application_id == app.id).limit(1)).first()
    try:
        if existing:
            log.info("payment already exists for application %s, skipping duplicate", app.id)
            if row.status != TimesheetStatus.paid:
                row.status = TimesheetStatus.approved
            db.commit()
            db.refresh(row)
            return Approval(timesheet=row, payment_created=False, message="Timesheet approved (payment already exists)")

        shift = row.shift
        worker = db.get(Profile, row.worker_id)
        payment = Payment(
            application_id=app.id,
            timesheet_id=row.id,
            company_id=row.company_id,
            worker_id=row.worker_id,
            amount=total_pay(row, shift),
            hours_worked=worked_hours(row, shift),
            hourly_rate=shift.hourly_rate,
            status=PaymentStatus.pending,
            shift_title_snapshot=shift.title,
            worker_name_snapshot=worker.display_name if worker else "",
        )
        db.add(payment)
        row.status = TimesheetStatus.approved
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Payment for this timesheet was already created")
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("approving timesheet %s failed", timesheet_id)
        raise PersistenceError(f"Failed to approve timesheet: {e}")

    db.refresh(row)
    log.info("timesheet %s approved, payment %s created", row.id, payment.id)
    return Approval(timesheet=row, payment_created=True, message="Timesheet approved and payment created")
