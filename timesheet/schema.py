from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from core.clock import require_utc
from .models import TimesheetStatus


class TimesheetSchema(BaseModel):
    id: int
    shift_id: int
    worker_id: str
    company_id: str
    status: TimesheetStatus
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    manager_approved_start: Optional[datetime] = None
    manager_approved_end: Optional[datetime] = None
    is_no_show: bool = False
    model_config = ConfigDict(from_attributes=True)


class WorkerTimesheetSchema(TimesheetSchema):
    shift_title: str
    shift_start_time: datetime
    hourly_rate: Decimal
    hours_worked: Decimal
    total_pay: Decimal


class TimesheetUpdate(BaseModel):
    manager_approved_start: Optional[datetime] = None
    manager_approved_end: Optional[datetime] = None
    is_no_show: Optional[bool] = None
    status: Optional[Literal["pending", "disputed"]] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("manager_approved_start", "manager_approved_end")
    @classmethod
    def tz_aware(cls, dt: Optional[datetime]) -> Optional[datetime]:
        return dt if dt is None else require_utc(dt)

    @model_validator(mode="after")
    def end_after_start(self):
        if (
            self.manager_approved_start is not None
            and self.manager_approved_end is not None
            and self.manager_approved_end <= self.manager_approved_start
        ):
            raise ValueError("manager_approved_end must be after manager_approved_start")
        return self


class ApprovalResponse(BaseModel):
    timesheet: TimesheetSchema
    payment_created: bool
    message: str
