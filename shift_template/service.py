from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.clock import utcnow, aware
from core.errors import NotFound, Unauthorized, ValidationError
from manager import service as manager_service
from shift import service as shift_service
from shift.models import Shift
from shift.schemas import ShiftCreate
from .models import ShiftTemplate
from .schema import TemplateCreate, TemplateUpdate, ShiftFromTemplatePayload

log = logging.getLogger("shiftmarket.shift_template")


def get_templates(db: Session, *, company_id: str) -> List[ShiftTemplate]:
    stmt = (
        select(ShiftTemplate)
        .where(ShiftTemplate.company_id == company_id, ShiftTemplate.is_active.is_(True))
        .order_by(ShiftTemplate.template_name, ShiftTemplate.id)
    )
    return list(db.scalars(stmt))


def _owned(db: Session, template_id: int, company_id: str) -> ShiftTemplate:
    row = db.get(ShiftTemplate, template_id)
    if not row or not row.is_active:
        raise NotFound("Template not found")
    if row.company_id != company_id:
        raise Unauthorized("You do not have permission to use this template")
    return row


def _check_manager(db: Session, manager_id: Optional[int], company_id: str) -> None:
    if manager_id is not None and not manager_service.get_manager_for_company(db, manager_id, company_id):
        raise ValidationError("manager_id does not belong to this company")


def create_template(db: Session, dto: TemplateCreate) -> ShiftTemplate:
    _check_manager(db, dto.manager_id, dto.company_id)
    row = ShiftTemplate(**dto.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("template %s (%s) created for company %s", row.id, row.template_name, row.company_id)
    return row


def update_template(db: Session, template_id: int, patch: TemplateUpdate, *, company_id: str) -> ShiftTemplate:
    row = _owned(db, template_id, company_id)
    data = patch.model_dump(exclude_unset=True)
    if "manager_id" in data:
        _check_manager(db, data["manager_id"], company_id)
    for k, v in data.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_template(db: Session, template_id: int, *, company_id: str) -> None:
    row = _owned(db, template_id, company_id)
    row.is_active = False
    db.commit()
    log.info("template %s deactivated", template_id)


def create_shift_from_template(
    db: Session,
    template_id: int,
    p: ShiftFromTemplatePayload,
    *,
    company_id: str,
    now: Optional[datetime] = None,
) -> Shift:
    now = aware(now) if now is not None else utcnow()
    t = _owned(db, template_id, company_id)
    if p.start_time <= now:
        raise ValidationError("start_time must be in the future")

    dto = ShiftCreate(
        company_id=company_id,
        title=t.title,
        description=t.description,
        category=t.category,
        location=p.location or t.location,
        start_time=p.start_time,
        end_time=p.end_time,
        hourly_rate=t.hourly_rate,
        break_minutes=t.break_minutes,
        is_break_paid=t.is_break_paid,
        vacancies_total=p.vacancies_total or t.vacancies_total,
    )
    return shift_service.create_shift(db, dto)
