from fastapi import APIRouter, Depends

from taskboard.middleware.auth_middleware import get_current_user
from taskboard.models.user import User
from taskboard.schemas.common import ApiResponse, envelope
from taskboard.schemas.user import UserOut

router = APIRouter(tags=["users"])


@router.get("/api/user", response_model=ApiResponse[UserOut])
def me(current_user: User = Depends(get_current_user)):
    return envelope(current_user)
