from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.clock import require_utc


class TemplateSchema(BaseModel):
    id: int
    company_id: str
    manager_id: Optional[int] = None
    template_name: str
    title: str
    description: Optional[str] = None
    category: str
    location: Optional[str] = None
    hourly_rate: Decimal
    vacancies_total: int
    break_minutes: int = 0
    is_break_paid: bool = False
    is_active: bool = True
    model_config = ConfigDict(from_attributes=True)


# PUBLIC payload from clients
class TemplateCreatePayload(BaseModel):
    template_name: str = Field(..., min_length=1, max_length=120)
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    location: Optional[str] = None
    manager_id: Optional[int] = None
    hourly_rate: Decimal = Field(..., ge=0)
    vacancies_total: int = Field(1, ge=1)
    break_minutes: int = Field(0, ge=0)
    is_break_paid: bool = False

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator("description", "location")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# INTERNAL DTO for the service
class TemplateCreate(TemplateCreatePayload):
    company_id: str


class TemplateUpdate(BaseModel):
    template_name: Optional[str] = Field(None, min_length=1, max_length=120)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    manager_id: Optional[int] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    vacancies_total: Optional[int] = Field(None, ge=1)
    break_minutes: Optional[int] = Field(None, ge=0)
    is_break_paid: Optional[bool] = None

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator(
        "template_name", "title", "category", "hourly_rate", "vacancies_total", "break_minutes", "is_break_paid"
    )
    @classmethod
    def not_cleared(cls, v):
        if v is None:
            raise ValueError("cannot be empty")
        return v

    @field_validator("description", "location")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ShiftFromTemplatePayload(BaseModel):
    start_time: datetime = Field(..., description="TZ-aware ISO8601")
    end_time: datetime = Field(..., description="TZ-aware ISO8601")
    vacancies_total: Optional[int] = Field(None, ge=1)
    location: Optional[str] = None

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
