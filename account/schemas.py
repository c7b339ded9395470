from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .models import Role, TaxCardType


class ProfileSchema(BaseModel):
    id: str
    role: Role
    display_name: str
    company_name: Optional[str] = None
    banned_until: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


def _digits(value: str, *, field: str, lengths: tuple[int, ...]) -> str:
    cleaned = value.replace(" ", "").replace("-", "")
    if not cleaned.isdigit() or len(cleaned) not in lengths:
        raise ValueError(f"{field} must be {' or '.join(map(str, lengths))} digits")
    return cleaned


# ---------- onboarding payloads ----------

class WorkerOnboardingPayload(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=1, max_length=32)
    cpr_number: str
    tax_card_type: TaxCardType
    bank_reg_number: str
    bank_account_number: str
    su_limit_amount: Optional[Decimal] = Field(None, ge=0)
    shirt_size: Optional[str] = Field(None, max_length=8)
    shoe_size: Optional[str] = Field(None, max_length=8)

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator("cpr_number")
    @classmethod
    def cpr_digits(cls, v: str) -> str:
        return _digits(v, field="cpr_number", lengths=(10,))

    @field_validator("bank_reg_number")
    @classmethod
    def reg_digits(cls, v: str) -> str:
        return _digits(v, field="bank_reg_number", lengths=(4,))

    @field_validator("bank_account_number")
    @classmethod
    def account_digits(cls, v: str) -> str:
        return _digits(v, field="bank_account_number", lengths=tuple(range(6, 11)))

    @field_validator("shirt_size", "shoe_size")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class CompanyOnboardingPayload(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    cvr_number: str
    ean_number: Optional[str] = None

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator("cvr_number")
    @classmethod
    def cvr_digits(cls, v: str) -> str:
        return _digits(v, field="cvr_number", lengths=(8,))

    @field_validator("ean_number")
    @classmethod
    def ean_digits(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return _digits(v, field="ean_number", lengths=(13,))


# ---------- details out ----------

class WorkerDetailsSchema(BaseModel):
    profile_id: str
    first_name: str
    last_name: str
    phone_number: str
    cpr_masked: str
    tax_card_type: TaxCardType
    bank_reg_number: str
    bank_account_number: str
    su_limit_amount: Optional[Decimal] = None
    shirt_size: Optional[str] = None
    shoe_size: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class CompanyDetailsSchema(BaseModel):
    profile_id: str
    company_name: str
    cvr_number: str
    ean_number: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class WorkerOnboardingResponse(BaseModel):
    profile: ProfileSchema
    details: WorkerDetailsSchema


class CompanyOnboardingResponse(BaseModel):
    profile: ProfileSchema
    details: CompanyDetailsSchema
