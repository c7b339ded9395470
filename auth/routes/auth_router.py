from fastapi import APIRouter, Depends
from auth.services.auth_service import get_current_active_user
from account.schemas import ProfileSchema

auth_router = APIRouter(prefix="/auth", tags=["Auth"])


@auth_router.get("/me", response_model=ProfileSchema)
def read_me(user=Depends(get_current_active_user)):
    return user
