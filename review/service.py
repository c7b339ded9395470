from __future__ import annotations
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.errors import NotFound, Unauthorized, ValidationError, Conflict
from shift.models import Shift, ShiftStatus
from application.models import ShiftApplication, ApplicationStatus
from .models import Review
from .schema import ReviewCreate

log = logging.getLogger("shiftmarket.review")

REVIEWABLE = (ShiftStatus.completed, ShiftStatus.cancelled)


def get_existing_review(db: Session, *, shift_id: int, reviewer_id: str, worker_id: str) -> Review | None:
    stmt = select(Review).where(
        Review.shift_id == shift_id,
        Review.reviewer_id == reviewer_id,
        Review.reviewee_id == worker_id,
    )
    return db.scalars(stmt).first()


def get_worker_reviews(db: Session, *, worker_id: str) -> List[Review]:
    stmt = select(Review).where(Review.reviewee_id == worker_id).order_by(Review.created_at.desc(), Review.id.desc())
    return list(db.scalars(stmt))


def submit_review(db: Session, dto: ReviewCreate) -> Review:
    if dto.rating < 1 or dto.rating > 5:
        raise ValidationError("Rating must be between 1 and 5")

    comment = (dto.comment or "").strip() or None
    tags = dto.tags or None

    shift = db.get(Shift, dto.shift_id)
    if not shift:
        raise NotFound("Shift not found")
    if shift.company_id != dto.reviewer_id:
        raise Unauthorized("Unauthorized: You can only review workers from your own shifts")
    if not dto.from_timesheet and shift.status not in REVIEWABLE:
        raise Conflict("You can only review workers from completed shifts")

    if get_existing_review(db, shift_id=dto.shift_id, reviewer_id=dto.reviewer_id, worker_id=dto.worker_id):
        raise Conflict("You have already reviewed this worker for this shift")

    hired = db.scalars(
        select(ShiftApplication.worker_id).where(
            ShiftApplication.shift_id == dto.shift_id,
            ShiftApplication.worker_id == dto.worker_id,
            ShiftApplication.status == ApplicationStatus.accepted,
        )
    ).first()
    if not hired:
        raise ValidationError("This worker was not hired for this shift")

    row = Review(
        shift_id=dto.shift_id,
        reviewer_id=dto.reviewer_id,
        reviewee_id=hired,
        rating=dto.rating,
        comment=comment,
        tags=tags,
    )
    db.add(row)
    # duplicate triple raises IntegrityError; router maps to 409
    db.commit()
    db.refresh(row)
    log.info("review %s: company %s rated worker %s %d/5", row.id, row.reviewer_id, row.reviewee_id, row.rating)
    return row
