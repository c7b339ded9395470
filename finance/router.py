from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company, require_worker
from .schema import CompanyFinances, WorkerEarnings
from . import service

finance_router = APIRouter(prefix="/finances", tags=["Finances"])


@finance_router.get("/company", response_model=CompanyFinances)
def company_finances(db: Session = Depends(get_db), user=Depends(require_company)):
    return service.get_company_finances(db, company_id=user.id)


@finance_router.get("/worker", response_model=WorkerEarnings)
def worker_earnings(
    year: Optional[int] = Query(None, ge=2000),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    user=Depends(require_worker),
):
    return service.get_worker_earnings(db, worker_id=user.id, year=year, month=month)
