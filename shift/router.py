from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from core.database import get_db
from core.revalidation import PathInvalidator, get_invalidator, application_paths
from auth.services.auth_service import get_current_active_user
from authz.deps import require_company
from .models import ShiftStatus
from .schemas import ShiftSchema, ShiftCreatePayload, ShiftCreate, ShiftUpdate
from shift import service

shift_router = APIRouter(prefix="/shifts", tags=["Shifts"])


class ShiftCancellationResponse(BaseModel):
    shift: ShiftSchema
    is_upcoming: bool
    is_late: bool
    cancelled_application_ids: list[int]
    revalidate: list[str] = []


# Job board: open shifts that have not started yet
@shift_router.get("", response_model=list[ShiftSchema])
def list_shifts(
    category: Optional[str] = Query(None, description="Filter by category"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
):
    return service.get_job_board(db, category=category, start=start, end=end)

@shift_router.get("/mine", response_model=list[ShiftSchema])
def list_my_shifts(
    status_filter: Optional[ShiftStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user = Depends(require_company),
):
    return service.get_company_shifts(db, company_id=user.id, status=status_filter)

@shift_router.get("/{shift_id}", response_model=ShiftSchema)
def get_shift(shift_id: int, db: Session = Depends(get_db), user = Depends(get_current_active_user)):
    obj = service.get_shift(db, shift_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Shift not found")
    return obj

@shift_router.post("", response_model=ShiftSchema, status_code=status.HTTP_201_CREATED)
def create_shift(payload: ShiftCreatePayload, db: Session = Depends(get_db), user = Depends(require_company)):
    internal = ShiftCreate(company_id=user.id, **payload.model_dump())
    return service.create_shift(db, internal)

@shift_router.patch("/{shift_id}", response_model=ShiftSchema)
def patch_shift(shift_id: int, payload: ShiftUpdate, db: Session = Depends(get_db), user = Depends(require_company)):
    if not service.get_shift_for_company(db, shift_id, user.id):
        raise HTTPException(status_code=404, detail="Shift not found")
    return service.update_shift(db, shift_id, payload, company_id=user.id)

@shift_router.post("/{shift_id}/cancel", response_model=ShiftCancellationResponse)
def cancel_shift(
    shift_id: int,
    db: Session = Depends(get_db),
    user = Depends(require_company),
    invalidator: PathInvalidator = Depends(get_invalidator),
):
    row, cls, ids = service.cancel_shift(db, shift_id, company_id=user.id)
    return ShiftCancellationResponse(
        shift=ShiftSchema.model_validate(row),
        is_upcoming=cls.is_upcoming,
        is_late=cls.is_late,
        cancelled_application_ids=ids,
        revalidate=invalidator.invalidate_many(application_paths(shift_id)),
    )

@shift_router.post("/{shift_id}/complete", response_model=ShiftSchema)
def complete_shift(shift_id: int, db: Session = Depends(get_db), user = Depends(require_company)):
    return service.complete_shift(db, shift_id, company_id=user.id)
