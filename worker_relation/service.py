from __future__ import annotations
import logging
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.errors import NotFound, ValidationError
from account.models import Profile, Role
from .models import WorkerRelation, RelationType

log = logging.getLogger("shiftmarket.worker_relation")


def get_relations(db: Session, *, company_id: str, relation_type: Optional[RelationType] = None) -> List[WorkerRelation]:
    stmt = select(WorkerRelation).where(WorkerRelation.company_id == company_id)
    if relation_type is not None:
        stmt = stmt.where(WorkerRelation.relation_type == relation_type)
    stmt = stmt.order_by(WorkerRelation.created_at.desc(), WorkerRelation.id.desc())
    return list(db.scalars(stmt))


def get_relation(db: Session, company_id: str, worker_id: str) -> WorkerRelation | None:
    stmt = select(WorkerRelation).where(
        WorkerRelation.company_id == company_id,
        WorkerRelation.worker_id == worker_id,
    )
    return db.scalars(stmt).first()


def upsert_relation(db: Session, *, company_id: str, worker_id: str, relation_type: RelationType) -> WorkerRelation:
    """Put the worker on the favorite or blacklist. Moving between lists is the same call."""
    worker = db.get(Profile, worker_id)
    if not worker:
        raise NotFound("Worker not found")
    if worker.role != Role.worker:
        raise ValidationError("Only workers can be added to staff lists")

    row = get_relation(db, company_id, worker_id)
    if row is None:
        row = WorkerRelation(company_id=company_id, worker_id=worker_id, relation_type=relation_type)
        db.add(row)
    else:
        row.relation_type = relation_type
    db.commit()
    db.refresh(row)
    log.info("company %s marked worker %s as %s", company_id, worker_id, relation_type.value)
    return row


def remove_relation(db: Session, *, company_id: str, worker_id: str) -> None:
    row = get_relation(db, company_id, worker_id)
    if row:
        db.delete(row)
        db.commit()
    return
