from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from shift.models import Shift
from .policy import classify_cancellation, cancellation_consequence
from .schema import CancellationPolicySchema

cancellation_router = APIRouter(prefix="/cancellation-policy", tags=["Cancellation policy"])


# What the cancel dialog warns about, evaluated fresh on every call
@cancellation_router.get("/shifts/{shift_id}", response_model=CancellationPolicySchema)
def get_policy_for_shift(shift_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    shift = db.get(Shift, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")
    cls = classify_cancellation(shift.start_time)
    consequence = cancellation_consequence(user.role, cls)
    return CancellationPolicySchema(
        shift_id=shift.id,
        is_upcoming=cls.is_upcoming,
        is_late=cls.is_late,
        consequence=consequence.message,
        fee_amount=consequence.fee_amount,
        currency=consequence.currency,
        ban_days=consequence.ban_days,
    )
