from __future__ import annotations
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.errors import NotFound, Unauthorized
from .models import CompanyManager
from .schema import ManagerCreate, ManagerUpdate

log = logging.getLogger("shiftmarket.manager")


def get_managers(db: Session, *, company_id: str) -> List[CompanyManager]:
    stmt = (
        select(CompanyManager)
        .where(CompanyManager.company_id == company_id)
        .order_by(CompanyManager.created_at.desc(), CompanyManager.id.desc())
    )
    return list(db.scalars(stmt))


def get_manager_for_company(db: Session, manager_id: int, company_id: str) -> CompanyManager | None:
    stmt = select(CompanyManager).where(CompanyManager.id == manager_id, CompanyManager.company_id == company_id)
    return db.scalars(stmt).first()


def _owned(db: Session, manager_id: int, company_id: str) -> CompanyManager:
    row = db.get(CompanyManager, manager_id)
    if not row:
        raise NotFound("Manager not found")
    if row.company_id != company_id:
        raise Unauthorized("You do not have permission to change this manager")
    return row


def create_manager(db: Session, dto: ManagerCreate) -> CompanyManager:
    row = CompanyManager(
        company_id=dto.company_id,
        first_name=dto.first_name,
        last_name=dto.last_name,
        email=dto.email,
        phone_number=dto.phone_number,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("manager %s added for company %s", row.id, row.company_id)
    return row


def update_manager(db: Session, manager_id: int, patch: ManagerUpdate, *, company_id: str) -> CompanyManager:
    row = _owned(db, manager_id, company_id)
    for k, v in patch.model_dump(exclude_unset=True).items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_manager(db: Session, manager_id: int, *, company_id: str) -> None:
    row = _owned(db, manager_id, company_id)
    db.delete(row)
    db.commit()
    log.info("manager %s removed from company %s", manager_id, company_id)
