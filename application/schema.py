from __future__ import annotations
from datetime import datetime
from typing import Optional
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, field_validator

from .models import ApplicationStatus
from shift.schemas import ShiftSchema


class ApplicationSchema(BaseModel):
    id: int
    shift_id: int
    worker_id: str
    company_id: str
    status: ApplicationStatus
    applied_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ApplicationWithShiftSchema(ApplicationSchema):
    shift: ShiftSchema


# PUBLIC payload from clients
class ApplicationCreatePayload(BaseModel):
    shift_id: int
    model_config = ConfigDict(extra="forbid")


# "accepted" is the only name stored and returned. "approved" is the legacy
# name older clients send for the same decision.
LEGACY_STATUS_ALIASES = {"approved": ApplicationStatus.accepted.value}


def to_application_status(value: str) -> str:
    return LEGACY_STATUS_ALIASES.get(value, value)


class ApplicationDecision(BaseModel):
    status: Literal["accepted", "rejected"]
    model_config = ConfigDict(extra="forbid")

    @field_validator("status", mode="before")
    @classmethod
    def map_legacy_name(cls, v):
        return to_application_status(v) if isinstance(v, str) else v


class StatusChangeResponse(BaseModel):
    application: ApplicationSchema
    changed: bool
    auto_rejected_ids: list[int] = []
    revalidate: list[str] = []


class CancellationResponse(BaseModel):
    application: ApplicationSchema
    is_upcoming: bool
    is_late: bool
    consequence: str
    revalidate: list[str] = []
