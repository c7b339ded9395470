from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company
from .models import RelationType
from .schema import WorkerRelationSchema, WorkerRelationPayload
from . import service

worker_relation_router = APIRouter(prefix="/worker-relations", tags=["Worker relations"])


@worker_relation_router.get("", response_model=list[WorkerRelationSchema])
def list_relations(
    relation_type: Optional[RelationType] = None,
    db: Session = Depends(get_db),
    user=Depends(require_company),
):
    return service.get_relations(db, company_id=user.id, relation_type=relation_type)


@worker_relation_router.put("/{worker_id}", response_model=WorkerRelationSchema)
def put_relation(worker_id: str, payload: WorkerRelationPayload, db: Session = Depends(get_db), user=Depends(require_company)):
    try:
        return service.upsert_relation(
            db, company_id=user.id, worker_id=worker_id, relation_type=payload.relation_type
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="relation was changed concurrently, retry")


@worker_relation_router.delete("/{worker_id}")
def delete_relation(worker_id: str, db: Session = Depends(get_db), user=Depends(require_company)):
    if not service.get_relation(db, user.id, worker_id):
        raise HTTPException(status_code=404, detail="relation not found")
    service.remove_relation(db, company_id=user.id, worker_id=worker_id)
    return {"message": "relation removed"}
