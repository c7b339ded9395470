from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from core.clock import require_utc
from .models import ShiftStatus


class ShiftSchema(BaseModel):
    id: int
    company_id: str
    title: str
    description: Optional[str] = None
    category: str
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    hourly_rate: Decimal
    break_minutes: int = 0
    is_break_paid: bool = False
    vacancies_total: int
    vacancies_taken: int
    status: ShiftStatus

    model_config = ConfigDict(from_attributes=True)


class ShiftCreatePayload(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    location: Optional[str] = None
    start_time: datetime = Field(..., description="TZ-aware ISO8601")
    end_time: datetime = Field(..., description="TZ-aware ISO8601")
    hourly_rate: Decimal = Field(..., ge=0)
    break_minutes: int = Field(0, ge=0)
    is_break_paid: bool = False
    vacancies_total: int = Field(1, ge=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("start_time", "end_time")
    @classmethod
    def tz_aware(cls, dt: datetime) -> datetime:
        return require_utc(dt)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


# Internal DTO the service uses
class ShiftCreate(ShiftCreatePayload):
    company_id: str


class ShiftUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    break_minutes: Optional[int] = Field(None, ge=0)
    is_break_paid: Optional[bool] = None
    vacancies_total: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("start_time", "end_time")
    @classmethod
    def tz_aware(cls, dt: Optional[datetime]) -> Optional[datetime]:
        return dt if dt is None else require_utc(dt)

    @model_validator(mode="after")
    def check_dates_if_both_present(self):
        if self.start_time is not None and self.end_time is not None and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self
