from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_company
from .schema import ReviewSchema, ReviewCreatePayload, ReviewCreate, WorkerReviews
from . import service

review_router = APIRouter(prefix="/reviews", tags=["Reviews"])


@review_router.post("", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
def submit_review(payload: ReviewCreatePayload, db: Session = Depends(get_db), user=Depends(require_company)):
    dto = ReviewCreate(reviewer_id=user.id, **payload.model_dump())
    try:
        return service.submit_review(db, dto)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already reviewed this worker for this shift")


@review_router.get("/shifts/{shift_id}/workers/{worker_id}", response_model=ReviewSchema)
def get_existing_review(shift_id: int, worker_id: str, db: Session = Depends(get_db), user=Depends(require_company)):
    obj = service.get_existing_review(db, shift_id=shift_id, reviewer_id=user.id, worker_id=worker_id)
    if not obj:
        raise HTTPException(status_code=404, detail="review not found")
    return obj


@review_router.get("/workers/{worker_id}", response_model=WorkerReviews)
def list_worker_reviews(worker_id: str, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    rows = service.get_worker_reviews(db, worker_id=worker_id)
    avg = round(sum(r.rating for r in rows) / len(rows), 2) if rows else None
    return WorkerReviews(
        worker_id=worker_id,
        average_rating=avg,
        count=len(rows),
        reviews=[ReviewSchema.model_validate(r) for r in rows],
    )
