from __future__ import annotations
from typing import TYPE_CHECKING
from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlalchemy import DateTime, String, Text, Integer, Numeric, Boolean, ForeignKey, Index, Enum as SAEnum, CheckConstraint, text
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base

if TYPE_CHECKING:
    from account.models import Profile


class ShiftStatus(str, Enum):
    published = "published"
    full = "full"
    completed = "completed"
    cancelled = "cancelled"


class Shift(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(primary_key=True)

    company_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    category: Mapped[str] = mapped_column(String(80), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time:   Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    break_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_break_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    vacancies_total: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    vacancies_taken: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    status: Mapped[ShiftStatus] = mapped_column(
        SAEnum(ShiftStatus, name="shift_status"), nullable=False, default=ShiftStatus.published
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # relationships
    company: Mapped["Profile"] = relationship("Profile")

    __table_args__ = (
        CheckConstraint("vacancies_taken <= vacancies_total", name="ck_shift_vacancies"),
        CheckConstraint("vacancies_taken >= 0", name="ck_shift_vacancies_taken_nonneg"),
    )

# job board scans published shifts by start time
Index("ix_shifts_status_start", Shift.status, Shift.start_time)
Index("ix_shifts_company_start", Shift.company_id, Shift.start_time)
