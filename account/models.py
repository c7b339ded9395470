from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Numeric, Enum as SAEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class Role(str, Enum):
    worker = "worker"
    company = "company"
    admin = "admin"


class Profile(Base):
    __tablename__ = "profiles"

    # id issued by the hosted auth provider (token "sub")
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    role: Mapped[Role] = mapped_column(SAEnum(Role, name="profile_role"), nullable=False)
    display_name: Mapped[str] = mapped_column(String(120), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=text("true"), default=True, nullable=False)
    banned_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TaxCardType(str, Enum):
    hovedkort = "Hovedkort"
    bikort = "Bikort"
    frikort = "Frikort"


class WorkerDetails(Base):
    __tablename__ = "worker_details"

    profile_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    # only the last four digits are kept; the full CPR never reaches this table
    cpr_masked: Mapped[str] = mapped_column(String(11), nullable=False)
    tax_card_type: Mapped[TaxCardType] = mapped_column(SAEnum(TaxCardType, name="tax_card_type"), nullable=False)
    bank_reg_number: Mapped[str] = mapped_column(String(4), nullable=False)
    bank_account_number: Mapped[str] = mapped_column(String(10), nullable=False)
    su_limit_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    shirt_size: Mapped[str | None] = mapped_column(String(8), nullable=True)
    shoe_size: Mapped[str | None] = mapped_column(String(8), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CompanyDetails(Base):
    __tablename__ = "company_details"

    profile_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    cvr_number: Mapped[str] = mapped_column(String(8), nullable=False, unique=True)
    ean_number: Mapped[str | None] = mapped_column(String(13), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
