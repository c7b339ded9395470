from __future__ import annotations
from datetime import datetime
from enum import Enum
from sqlalchemy import DateTime, Boolean, ForeignKey, UniqueConstraint, Enum as SAEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base


class TimesheetStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    disputed = "disputed"
    paid = "paid"


class Timesheet(Base):
    __tablename__ = "timesheets"

    id: Mapped[int] = mapped_column(primary_key=True)
    shift_id: Mapped[int] = mapped_column(ForeignKey("shifts.id", ondelete="CASCADE"), index=True)
    worker_id: Mapped[str] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)
    company_id: Mapped[str] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)

    clock_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    clock_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    manager_approved_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    manager_approved_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_no_show: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))

    status: Mapped[TimesheetStatus] = mapped_column(
        SAEnum(TimesheetStatus, name="timesheet_status"), nullable=False, default=TimesheetStatus.pending
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # relationships
    shift = relationship("Shift", lazy="joined")

    __table_args__ = (
        UniqueConstraint("shift_id", "worker_id", name="uq_timesheet_shift_worker"),
    )
