from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_token_subject
from authz.deps import require_company, require_worker
from .schemas import (
    ProfileSchema,
    WorkerOnboardingPayload,
    CompanyOnboardingPayload,
    WorkerDetailsSchema,
    CompanyDetailsSchema,
    WorkerOnboardingResponse,
    CompanyOnboardingResponse,
)
from . import service

account_router = APIRouter(prefix="/account", tags=["Account"])


# Onboarding runs on a valid token before any profile exists
@account_router.post("/onboarding/worker", response_model=WorkerOnboardingResponse, status_code=status.HTTP_201_CREATED)
def onboard_worker(payload: WorkerOnboardingPayload, db: Session = Depends(get_db), subject: str = Depends(get_token_subject)):
    profile, details = service.onboard_worker(db, subject, payload)
    return WorkerOnboardingResponse(
        profile=ProfileSchema.model_validate(profile),
        details=WorkerDetailsSchema.model_validate(details),
    )


@account_router.post("/onboarding/company", response_model=CompanyOnboardingResponse, status_code=status.HTTP_201_CREATED)
def onboard_company(payload: CompanyOnboardingPayload, db: Session = Depends(get_db), subject: str = Depends(get_token_subject)):
    profile, details = service.onboard_company(db, subject, payload)
    return CompanyOnboardingResponse(
        profile=ProfileSchema.model_validate(profile),
        details=CompanyDetailsSchema.model_validate(details),
    )


@account_router.get("/worker-details", response_model=WorkerDetailsSchema)
def read_worker_details(db: Session = Depends(get_db), user=Depends(require_worker)):
    obj = service.get_worker_details(db, user.id)
    if not obj:
        raise HTTPException(status_code=404, detail="Worker details not found")
    return obj


@account_router.get("/company-details", response_model=CompanyDetailsSchema)
def read_company_details(db: Session = Depends(get_db), user=Depends(require_company)):
    obj = service.get_company_details(db, user.id)
    if not obj:
        raise HTTPException(status_code=404, detail="Company details not found")
    return obj
