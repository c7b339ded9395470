from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company
from .schema import ManagerSchema, ManagerCreatePayload, ManagerCreate, ManagerUpdate
from . import service

manager_router = APIRouter(prefix="/managers", tags=["Managers"])


@manager_router.get("", response_model=list[ManagerSchema])
def list_managers(db: Session = Depends(get_db), user=Depends(require_company)):
    return service.get_managers(db, company_id=user.id)


@manager_router.post("", response_model=ManagerSchema, status_code=status.HTTP_201_CREATED)
def create_manager(payload: ManagerCreatePayload, db: Session = Depends(get_db), user=Depends(require_company)):
    return service.create_manager(db, ManagerCreate(company_id=user.id, **payload.model_dump()))


@manager_router.patch("/{manager_id}", response_model=ManagerSchema)
def patch_manager(manager_id: int, payload: ManagerUpdate, db: Session = Depends(get_db), user=Depends(require_company)):
    return service.update_manager(db, manager_id, payload, company_id=user.id)


@manager_router.delete("/{manager_id}")
def delete_manager(manager_id: int, db: Session = Depends(get_db), user=Depends(require_company)):
    service.delete_manager(db, manager_id, company_id=user.id)
    return {"message": "Manager deleted successfully"}
