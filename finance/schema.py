from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict

from .models import PaymentStatus


class PaymentSchema(BaseModel):
    id: int
    amount: Decimal
    status: PaymentStatus
    currency: str = "DKK"
    shift_title_snapshot: str
    worker_name_snapshot: str
    hours_worked: Decimal
    hourly_rate: Decimal
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class FinanceSummary(BaseModel):
    total_pending: Decimal
    currency: str


class CompanyFinances(BaseModel):
    summary: FinanceSummary
    transactions: list[PaymentSchema]


class WorkerEarnings(BaseModel):
    all_time: Decimal
    monthly: Optional[Decimal] = None
    year: Optional[int] = None
    month: Optional[int] = None
    currency: str
