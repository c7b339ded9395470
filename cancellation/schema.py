from typing import Optional
from pydantic import BaseModel


class CancellationPolicySchema(BaseModel):
    shift_id: int
    is_upcoming: bool
    is_late: bool
    consequence: str
    fee_amount: Optional[int] = None
    currency: Optional[str] = None
    ban_days: Optional[int] = None
