# shift/service.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.clock import aware, utcnow
from core.errors import NotFound, Unauthorized, ValidationError, Conflict, PersistenceError
from application.models import ShiftApplication, ApplicationStatus
from application.overlap import overlaps
from cancellation.policy import classify_cancellation, CancellationClass
from .models import Shift, ShiftStatus
from .schemas import ShiftCreate, ShiftUpdate

log = logging.getLogger("shiftmarket.shift")

OPEN_STATUSES = (ShiftStatus.published, ShiftStatus.full)


def get_shift(db: Session, shift_id: int) -> Shift | None:
    return db.get(Shift, shift_id)


def get_shift_for_company(db: Session, shift_id: int, company_id: str) -> Optional[Shift]:
    stmt = select(Shift).where(Shift.id == shift_id, Shift.company_id == company_id)
    return db.scalars(stmt).first()


def lock_shift(db: Session, shift_id: int) -> Shift | None:
    # FOR UPDATE is dropped by backends without row locks (SQLite)
    stmt = select(Shift).where(Shift.id == shift_id).with_for_update()
    return db.scalars(stmt).first()


def get_job_board(
    db: Session,
    *,
    now: Optional[datetime] = None,
    category: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[Shift]:
    now = aware(now) if now is not None else utcnow()
    stmt = select(Shift).where(Shift.status == ShiftStatus.published, Shift.start_time > now)
    if category:
        stmt = stmt.where(Shift.category == category)
    if start is not None:
        stmt = stmt.where(Shift.end_time > aware(start))    # overlaps window
    if end is not None:
        stmt = stmt.where(Shift.start_time < aware(end))    # overlaps window
    stmt = stmt.order_by(Shift.start_time, Shift.id)
    return list(db.scalars(stmt))


def get_company_shifts(
    db: Session,
    *,
    company_id: str,
    status: Optional[ShiftStatus] = None,
) -> list[Shift]:
    stmt = select(Shift).where(Shift.company_id == company_id)
    if status is not None:
        stmt = stmt.where(Shift.status == status)
    stmt = stmt.order_by(Shift.start_time.desc(), Shift.id)
    return list(db.scalars(stmt))


def create_shift(db: Session, shift: ShiftCreate) -> Shift:
    row = Shift(
        company_id=shift.company_id,
        title=shift.title,
        description=shift.description,
        category=shift.category,
        location=shift.location,
        start_time=shift.start_time,
        end_time=shift.end_time,
        hourly_rate=shift.hourly_rate,
        break_minutes=shift.break_minutes,
        is_break_paid=shift.is_break_paid,
        vacancies_total=shift.vacancies_total,
        vacancies_taken=0,
        status=ShiftStatus.published,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("shift %s published by %s", row.id, row.company_id)
    return row


def _accepted_worker_ids(db: Session, shift_id: int) -> list[str]:
    return list(db.scalars(
        select(ShiftApplication.worker_id).where(
            ShiftApplication.shift_id == shift_id,
            ShiftApplication.status == ApplicationStatus.accepted,
        )
    ))


def _other_applications(db: Session, shift_id: int, worker_ids: list[str], status: ApplicationStatus):
    """(application, shift) pairs of the workers on other, non-cancelled shifts."""
    stmt = (
        select(ShiftApplication, Shift)
        .join(Shift, Shift.id == ShiftApplication.shift_id)
        .where(
            ShiftApplication.worker_id.in_(worker_ids),
            ShiftApplication.status == status,
            ShiftApplication.shift_id != shift_id,
            Shift.status != ShiftStatus.cancelled,
        )
    )
    return db.execute(stmt).all()


def update_shift(
    db: Session,
    shift_id: int,
    patch: ShiftUpdate,
    *,
    company_id: str,
    now: Optional[datetime] = None,
) -> Shift:
    """Edit an open shift.

    Moving the window re-checks every accepted worker: a move onto another of
    their bookings is refused, and their pending applications that now overlap
    are rejected in the same commit.
    """
    now = aware(now) if now is not None else utcnow()
    row = lock_shift(db, shift_id)
    if not row or row.company_id != company_id:
        raise NotFound("Shift not found")
    if row.status not in OPEN_STATUSES:
        raise Conflict("Only open shifts can be edited")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)

    new_start = aware(data.get("start_time", row.start_time))
    new_end = aware(data.get("end_time", row.end_time))
    if new_start >= new_end:
        raise ValidationError("start_time must be before end_time")
    if "start_time" in data and new_start <= now:
        raise ValidationError("start_time must be in the future")

    if data.get("vacancies_total") is not None and data["vacancies_total"] < row.vacancies_taken:
        raise ValidationError("vacancies_total cannot be lower than the number of accepted workers")

    moved = new_start != aware(row.start_time) or new_end != aware(row.end_time)
    booked = _accepted_worker_ids(db, row.id) if moved else []
    if booked:
        for app, other in _other_applications(db, row.id, booked, ApplicationStatus.accepted):
            if overlaps(new_start, new_end, other.start_time, other.end_time):
                raise Conflict(f"Worker {app.worker_id} is already booked on an overlapping shift")

    rejected: list[int] = []
    try:
        for k, v in data.items():
            setattr(row, k, v)
        _sync_full_status(row)

        if booked:
            rejected = [
                app.id
                for app, other in _other_applications(db, row.id, booked, ApplicationStatus.pending)
                if overlaps(new_start, new_end, other.start_time, other.end_time)
            ]
            if rejected:
                db.execute(
                    update(ShiftApplication)
                    .where(ShiftApplication.id.in_(rejected))
                    .values(status=ApplicationStatus.rejected)
                    .execution_options(synchronize_session="fetch")
                )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("updating shift %s failed", shift_id)
        raise PersistenceError(str(e))

    db.refresh(row)
    if rejected:
        log.info("rescheduling shift %s auto-rejected overlapping applications %s", row.id, rejected)
    return row


def _sync_full_status(shift: Shift) -> None:
    if shift.status == ShiftStatus.published and shift.vacancies_taken >= shift.vacancies_total:
        shift.status = ShiftStatus.full
    elif shift.status == ShiftStatus.full and shift.vacancies_taken < shift.vacancies_total:
        shift.status = ShiftStatus.published


def take_vacancy(shift: Shift) -> None:
    """Book one seat on the shift. Caller commits."""
    if shift.vacancies_taken >= shift.vacancies_total:
        raise Conflict("Shift is full")
    shift.vacancies_taken += 1
    _sync_full_status(shift)


def release_vacancy(shift: Shift) -> None:
    """Give one seat back. Caller commits."""
    if shift.vacancies_taken > 0:
        shift.vacancies_taken -= 1
    _sync_full_status(shift)


def cancel_shift(
    db: Session,
    shift_id: int,
    *,
    company_id: str,
    now: Optional[datetime] = None,
) -> tuple[Shift, CancellationClass, list[int]]:
    row = lock_shift(db, shift_id)
    if not row:
        raise NotFound("Shift not found")
    if row.company_id != company_id:
        raise Unauthorized()

    cls = classify_cancellation(row.start_time, now)
    if row.status == ShiftStatus.cancelled:
        return row, cls, []
    if row.status == ShiftStatus.completed:
        raise Conflict("Completed shifts cannot be cancelled")

    live = (ApplicationStatus.pending, ApplicationStatus.accepted, ApplicationStatus.waitlist)
    try:
        ids = list(db.scalars(
            select(ShiftApplication.id).where(
                ShiftApplication.shift_id == row.id,
                ShiftApplication.status.in_(live),
            )
        ))
        if ids:
            db.execute(
                update(ShiftApplication)
                .where(ShiftApplication.id.in_(ids))
                .values(status=ApplicationStatus.cancelled)
                .execution_options(synchronize_session="fetch")
            )
        row.status = ShiftStatus.cancelled
        row.vacancies_taken = 0
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("cancelling shift %s failed", shift_id)
        raise PersistenceError(str(e))

    db.refresh(row)
    log.info("shift %s cancelled (late=%s), %d applications cancelled", row.id, cls.is_late, len(ids))
    return row, cls, ids


def complete_shift(db: Session, shift_id: int, *, company_id: str, now: Optional[datetime] = None) -> Shift:
    row = get_shift_for_company(db, shift_id, company_id)
    if not row:
        raise NotFound("Shift not found")
    if row.status == ShiftStatus.cancelled:
        raise Conflict("Cancelled shifts cannot be completed")
    if aware(row.end_time) > aware(now or utcnow()):
        raise Conflict("Shift has not ended yet")

    row.status = ShiftStatus.completed
    db.commit()
    db.refresh(row)
    return row
