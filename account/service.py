from __future__ import annotations
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import Conflict
from .models import Profile, Role, WorkerDetails, CompanyDetails
from .schemas import WorkerOnboardingPayload, CompanyOnboardingPayload

log = logging.getLogger("shiftmarket.account")


def mask_cpr(cpr: str) -> str:
    return f"******-{cpr[-4:]}"


def get_worker_details(db: Session, profile_id: str) -> WorkerDetails | None:
    return db.get(WorkerDetails, profile_id)


def get_company_details(db: Session, profile_id: str) -> CompanyDetails | None:
    return db.get(CompanyDetails, profile_id)


def _profile_for(db: Session, profile_id: str, role: Role, display_name: str) -> Profile:
    # First login creates the profile; an existing one must already hold the role (or be admin)
    profile = db.get(Profile, profile_id)
    if profile is None:
        profile = Profile(id=profile_id, role=role, display_name=display_name)
        db.add(profile)
        db.flush()
        return profile
    if profile.role not in (role, Role.admin):
        raise Conflict(f"Profile is already registered as {profile.role.value}")
    return profile


def onboard_worker(db: Session, profile_id: str, p: WorkerOnboardingPayload) -> tuple[Profile, WorkerDetails]:
    if get_worker_details(db, profile_id):
        raise Conflict("Worker details already exist")

    profile = _profile_for(db, profile_id, Role.worker, f"{p.first_name} {p.last_name}")
    details = WorkerDetails(
        profile_id=profile.id,
        first_name=p.first_name,
        last_name=p.last_name,
        phone_number=p.phone_number,
        cpr_masked=mask_cpr(p.cpr_number),
        tax_card_type=p.tax_card_type,
        bank_reg_number=p.bank_reg_number,
        bank_account_number=p.bank_account_number,
        su_limit_amount=p.su_limit_amount,
        shirt_size=p.shirt_size,
        shoe_size=p.shoe_size,
    )
    db.add(details)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Worker details already exist")

    db.refresh(profile)
    db.refresh(details)
    log.info("worker %s onboarded", profile.id)
    return profile, details


def onboard_company(db: Session, profile_id: str, p: CompanyOnboardingPayload) -> tuple[Profile, CompanyDetails]:
    if get_company_details(db, profile_id):
        raise Conflict("Company details already exist")
    taken = db.scalars(select(CompanyDetails.profile_id).where(CompanyDetails.cvr_number == p.cvr_number)).first()
    if taken:
        raise Conflict("CVR number is already registered")

    profile = _profile_for(db, profile_id, Role.company, p.company_name)
    profile.company_name = p.company_name
    details = CompanyDetails(
        profile_id=profile.id,
        company_name=p.company_name,
        cvr_number=p.cvr_number,
        ean_number=p.ean_number,
    )
    db.add(details)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Company details already exist")

    db.refresh(profile)
    db.refresh(details)
    log.info("company %s onboarded (cvr %s)", profile.id, details.cvr_number)
    return profile, details
