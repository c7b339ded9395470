from fastapi import Depends, HTTPException
from auth.services.auth_service import get_current_active_user
from account.models import Profile, Role


def can_manage_shifts(role: Role) -> bool:
    match role:
        case Role.company | Role.admin:
            return True
        case Role.worker:
            return False
    raise ValueError(f"unknown role: {role!r}")


def require_company(user: Profile = Depends(get_current_active_user)) -> Profile:
    if not can_manage_shifts(user.role):
        raise HTTPException(status_code=403, detail="Company role required")
    return user


def require_worker(user: Profile = Depends(get_current_active_user)) -> Profile:
    if user.role != Role.worker:
        raise HTTPException(status_code=403, detail="Only workers can do this")
    return user
