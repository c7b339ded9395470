from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from core.clock import aware, utcnow
from core.errors import NotFound, Unauthorized, ValidationError, Conflict, PersistenceError
from account.models import Profile, Role
from shift.models import Shift, ShiftStatus
from shift import service as shift_service
from worker_relation.models import WorkerRelation, RelationType
from cancellation.policy import classify_cancellation, cancellation_consequence, CancellationClass, Consequence
from .models import ShiftApplication, ApplicationStatus
from .overlap import shifts_overlap
from .schema import to_application_status

log = logging.getLogger("shiftmarket.application")

DECISIONS = (ApplicationStatus.accepted, ApplicationStatus.rejected)


@dataclass
class StatusChange:
    application: ShiftApplication
    changed: bool
    auto_rejected_ids: list[int] = field(default_factory=list)


@dataclass
class Cancellation:
    application: ShiftApplication
    classification: CancellationClass
    consequence: Consequence


# ---------- reads ----------

def get_application(db: Session, application_id: int) -> ShiftApplication | None:
    return db.get(ShiftApplication, application_id)


def get_worker_applications(
    db: Session,
    *,
    worker_id: str,
    status: Optional[ApplicationStatus] = None,
) -> List[ShiftApplication]:
    stmt = (
        select(ShiftApplication)
        .options(joinedload(ShiftApplication.shift))
        .where(ShiftApplication.worker_id == worker_id)
    )
    if status is not None:
        stmt = stmt.where(ShiftApplication.status == status)
    stmt = stmt.order_by(ShiftApplication.applied_at.desc(), ShiftApplication.id.desc())
    return list(db.scalars(stmt))


def get_company_applications(
    db: Session,
    *,
    company_id: str,
    shift_id: Optional[int] = None,
    status: Optional[ApplicationStatus] = None,
) -> List[ShiftApplication]:
    stmt = select(ShiftApplication).where(ShiftApplication.company_id == company_id)
    if shift_id is not None:
        stmt = stmt.where(ShiftApplication.shift_id == shift_id)
    if status is not None:
        stmt = stmt.where(ShiftApplication.status == status)
    stmt = stmt.order_by(ShiftApplication.shift_id, ShiftApplication.applied_at, ShiftApplication.id)
    return list(db.scalars(stmt))


# ---------- apply ----------

def apply_to_shift(db: Session, worker: Profile, shift_id: int, *, now: Optional[datetime] = None) -> ShiftApplication:
    now = aware(now) if now is not None else utcnow()
    if worker.banned_until is not None and aware(worker.banned_until) > now:
        raise Unauthorized("Your account is suspended from applying to shifts")

    shift = db.get(Shift, shift_id)
    if not shift:
        raise NotFound("Shift not found")
    if shift.status not in shift_service.OPEN_STATUSES:
        raise Conflict("Shift is not available")
    if aware(shift.start_time) <= now:
        raise Conflict("Shift has already started")

    blocked = db.scalars(
        select(WorkerRelation.id).where(
            WorkerRelation.company_id == shift.company_id,
            WorkerRelation.worker_id == worker.id,
            WorkerRelation.relation_type == RelationType.blacklist,
        )
    ).first()
    if blocked:
        raise Unauthorized("You cannot apply to this company's shifts")

    existing = db.scalars(
        select(ShiftApplication.id).where(
            ShiftApplication.shift_id == shift_id,
            ShiftApplication.worker_id == worker.id,
            ShiftApplication.status != ApplicationStatus.cancelled,
        )
    ).first()
    if existing:
        raise Conflict("Already applied to this shift")

    status = (
        ApplicationStatus.waitlist
        if shift.vacancies_taken >= shift.vacancies_total
        else ApplicationStatus.pending
    )
    row = ShiftApplication(
        shift_id=shift.id,
        worker_id=worker.id,
        company_id=shift.company_id,
        status=status,
        applied_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("worker %s applied to shift %s (%s)", worker.id, shift.id, status.value)
    return row


# ---------- decisions ----------

def _ensure_not_double_booked(db: Session, app: ShiftApplication, shift: Shift) -> None:
    booked = db.scalars(
        select(Shift)
        .join(ShiftApplication, ShiftApplication.shift_id == Shift.id)
        .where(
            ShiftApplication.worker_id == app.worker_id,
            ShiftApplication.status == ApplicationStatus.accepted,
            ShiftApplication.id != app.id,
            Shift.status != ShiftStatus.cancelled,
        )
    )
    for other in booked:
        if shifts_overlap(shift, other):
            raise Conflict("Worker is already booked on an overlapping shift")


def reject_overlapping_pending(db: Session, accepted: ShiftApplication, shift: Shift) -> list[int]:
    """Reject the worker's other pending applications whose shift overlaps `shift`.

    Runs inside the caller's transaction; the caller commits.
    """
    pending = list(db.scalars(
        select(ShiftApplication)
        .where(
            ShiftApplication.worker_id == accepted.worker_id,
            ShiftApplication.status == ApplicationStatus.pending,
            ShiftApplication.id != accepted.id,
        )
        .with_for_update()
    ))
    if not pending:
        return []

    shift_ids = {a.shift_id for a in pending}
    shifts = {s.id: s for s in db.scalars(select(Shift).where(Shift.id.in_(shift_ids)))}

    ids = [
        a.id for a in pending
        if a.shift_id in shifts and shifts_overlap(shift, shifts[a.shift_id])
    ]
    if ids:
        db.execute(
            update(ShiftApplication)
            .where(ShiftApplication.id.in_(ids))
            .values(status=ApplicationStatus.rejected)
            .execution_options(synchronize_session="fetch")
        )
        log.info(
            "accepting application %s auto-rejected overlapping applications %s",
            accepted.id, ids,
        )
    return ids


def update_application_status(
    db: Session,
    application_id: int,
    new_status: str | ApplicationStatus,
    *,
    requester_id: str,
) -> StatusChange:
    try:
        target = ApplicationStatus(to_application_status(getattr(new_status, "value", new_status)))
    except ValueError:
        raise ValidationError(f"invalid status: {new_status}")
    if target not in DECISIONS:
        raise ValidationError("status must be accepted or rejected")

    app = db.get(ShiftApplication, application_id)
    if not app:
        raise NotFound("Application not found")

    shift = shift_service.lock_shift(db, app.shift_id)
    if not shift:
        raise NotFound("Shift not found")
    if shift.company_id != requester_id:
        raise Unauthorized()

    if app.status == target:
        return StatusChange(application=app, changed=False)
    if app.status == ApplicationStatus.cancelled:
        raise Conflict("Application was cancelled")

    rejected: list[int] = []
    if target == ApplicationStatus.accepted:
        if shift.status not in shift_service.OPEN_STATUSES:
            raise Conflict("Shift is not open")
        _ensure_not_double_booked(db, app, shift)
        if shift.vacancies_taken >= shift.vacancies_total:
            raise Conflict("Shift is full")

    previous = app.status
    try:
        if target == ApplicationStatus.accepted:
            shift_service.take_vacancy(shift)
            app.status = ApplicationStatus.accepted
            rejected = reject_overlapping_pending(db, app, shift)
        else:
            if previous == ApplicationStatus.accepted:
                shift_service.release_vacancy(shift)
            app.status = ApplicationStatus.rejected
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("status change of application %s failed", application_id)
        raise PersistenceError(str(e))

    db.refresh(app)
    log.info("application %s: %s -> %s", app.id, previous.value, app.status.value)
    return StatusChange(application=app, changed=True, auto_rejected_ids=rejected)


# ---------- cancellation ----------

def cancel_application(
    db: Session,
    application_id: int,
    requester: Profile,
    *,
    now: Optional[datetime] = None,
) -> Cancellation:
    app = db.get(ShiftApplication, application_id)
    if not app:
        raise NotFound("Application not found")
    shift = shift_service.lock_shift(db, app.shift_id)
    if not shift:
        raise NotFound("Shift not found")

    if requester.id == app.worker_id:
        role = Role.worker
    elif requester.id == shift.company_id:
        role = Role.company
    else:
        raise Unauthorized()

    cls = classify_cancellation(shift.start_time, now)
    consequence = cancellation_consequence(role, cls)
    if app.status == ApplicationStatus.cancelled:
        return Cancellation(application=app, classification=cls, consequence=consequence)
    if app.status == ApplicationStatus.accepted and not cls.is_upcoming:
        raise Conflict("Shift has already started")

    previous = app.status
    try:
        if previous == ApplicationStatus.accepted:
            shift_service.release_vacancy(shift)
        app.status = ApplicationStatus.cancelled
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("cancelling application %s failed", application_id)
        raise PersistenceError(str(e))

    db.refresh(app)
    log.info(
        "application %s cancelled by %s %s (was %s, late=%s)",
        app.id, role.value, requester.id, previous.value, cls.is_late,
    )
    return Cancellation(application=app, classification=cls, consequence=consequence)
