from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from core.revalidation import PathInvalidator, get_invalidator, application_paths
from auth.services.auth_service import get_current_active_user
from authz.deps import require_company, require_worker

from .models import ApplicationStatus
from .schema import (
    ApplicationSchema,
    ApplicationWithShiftSchema,
    ApplicationCreatePayload,
    ApplicationDecision,
    StatusChangeResponse,
    CancellationResponse,
    )
from . import service


application_router = APIRouter(prefix="/applications", tags=["Applications"])

# Candidates on the company's shifts. Optional filters.
@application_router.get("", response_model=list[ApplicationSchema])
def list_applications(
    shift_id: Optional[int] = Query(None),
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user = Depends(require_company),
    ):
    return service.get_company_applications(
        db,
        company_id=user.id,
        shift_id=shift_id,
        status=status_filter,
    )

# The worker's own applications with shift details
@application_router.get("/mine", response_model=list[ApplicationWithShiftSchema])
def list_my_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user = Depends(require_worker),
    ):
    return service.get_worker_applications(db, worker_id=user.id, status=status_filter)

# Apply to a shift (worker only)
@application_router.post("", response_model=ApplicationSchema, status_code=status.HTTP_201_CREATED)
def apply_to_shift(
    payload: ApplicationCreatePayload,
    db: Session = Depends(get_db),
    user = Depends(require_worker),
    ):
    try:
        return service.apply_to_shift(db, user, payload.shift_id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already applied to this shift")

# Accept or reject a candidate (owning company only)
@application_router.patch("/{application_id}/status", response_model=StatusChangeResponse)
def update_application_status(
    application_id: int,
    payload: ApplicationDecision,
    db: Session = Depends(get_db),
    user = Depends(require_company),
    invalidator: PathInvalidator = Depends(get_invalidator),
    ):
    result = service.update_application_status(
        db, application_id, payload.status, requester_id=user.id
    )
    paths = []
    if result.changed:
        paths = invalidator.invalidate_many(application_paths(result.application.shift_id))
    return StatusChangeResponse(
        application=ApplicationSchema.model_validate(result.application),
        changed=result.changed,
        auto_rejected_ids=result.auto_rejected_ids,
        revalidate=paths,
    )

# Cancel: the worker on their own application or the owning company
@application_router.post("/{application_id}/cancel", response_model=CancellationResponse)
def cancel_application(
    application_id: int,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    invalidator: PathInvalidator = Depends(get_invalidator),
    ):
    result = service.cancel_application(db, application_id, user)
    paths = invalidator.invalidate_many(application_paths(result.application.shift_id))
    return CancellationResponse(
        application=ApplicationSchema.model_validate(result.application),
        is_upcoming=result.classification.is_upcoming,
        is_late=result.classification.is_late,
        consequence=result.consequence.message,
        revalidate=paths,
    )
