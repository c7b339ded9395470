from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ReviewSchema(BaseModel):
    id: int
    shift_id: int
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: Optional[str] = None
    tags: Optional[list[str]] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# PUBLIC payload from clients
class ReviewCreatePayload(BaseModel):
    shift_id: int
    worker_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    tags: Optional[list[str]] = None
    # set by the timesheet approval flow, which runs before the shift is closed
    from_timesheet: bool = False
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class ReviewCreate(BaseModel):
    reviewer_id: str
    shift_id: int
    worker_id: str
    rating: int
    comment: Optional[str] = None
    tags: Optional[list[str]] = None
    from_timesheet: bool = False


class WorkerReviews(BaseModel):
    worker_id: str
    average_rating: Optional[float] = None
    count: int
    reviews: list[ReviewSchema]
