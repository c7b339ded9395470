from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company
from shift.schemas import ShiftSchema
from .schema import TemplateSchema, TemplateCreatePayload, TemplateCreate, TemplateUpdate, ShiftFromTemplatePayload
from . import service

shift_template_router = APIRouter(prefix="/shift-templates", tags=["Shift templates"])


@shift_template_router.get("", response_model=list[TemplateSchema])
def list_templates(db: Session = Depends(get_db), user=Depends(require_company)):
    return service.get_templates(db, company_id=user.id)


@shift_template_router.post("", response_model=TemplateSchema, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreatePayload, db: Session = Depends(get_db), user=Depends(require_company)):
    return service.create_template(db, TemplateCreate(company_id=user.id, **payload.model_dump()))


@shift_template_router.patch("/{template_id}", response_model=TemplateSchema)
def patch_template(template_id: int, payload: TemplateUpdate, db: Session = Depends(get_db), user=Depends(require_company)):
    return service.update_template(db, template_id, payload, company_id=user.id)


@shift_template_router.delete("/{template_id}")
def delete_template(template_id: int, db: Session = Depends(get_db), user=Depends(require_company)):
    service.delete_template(db, template_id, company_id=user.id)
    return {"message": "Template deleted successfully"}


# Publish a shift pre-filled from the template
@shift_template_router.post("/{template_id}/shifts", response_model=ShiftSchema, status_code=status.HTTP_201_CREATED)
def create_shift_from_template(
    template_id: int,
    payload: ShiftFromTemplatePayload,
    db: Session = Depends(get_db),
    user=Depends(require_company),
):
    return service.create_shift_from_template(db, template_id, payload, company_id=user.id)
