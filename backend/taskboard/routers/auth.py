"""Auth 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.exceptions import NotFoundError
from taskboard.middleware.auth_middleware import get_current_token, get_current_user
from taskboard.models.auth_token import AuthToken
from taskboard.models.user import User
from taskboard.schemas.common import ApiResponse, MessageOnly, envelope
from taskboard.schemas.user import (
    AuthData,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    RevokedCount,
    SessionOut,
    TokenData,
)
from taskboard.services import auth_service, notification_service, token_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

RESET_LINK_SENT = "If the email is registered, a password reset link has been sent."


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
def register(data: RegisterRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    user, token, expires_at = auth_service.register(db, data)
    # commit 이 끝난 뒤에만 큐에 넣는다. 발송 실패는 가입 결과에 영향을 주지 않는다.
    notification_service.queue_welcome_notification(background_tasks, user)
    return envelope(
        {"user": user, "token": token, "expires_at": expires_at},
        "User registered successfully",
    )


@router.post("/login", response_model=ApiResponse[AuthData])
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user, token, expires_at = auth_service.login(db, request.email, request.password)
    return envelope({"user": user, "token": token, "expires_at": expires_at}, "Login successful")


@router.post("/logout", response_model=MessageOnly)
def logout(current_token: AuthToken = Depends(get_current_token), db: Session = Depends(get_db)):
    auth_service.logout(db, current_token)
    return {"success": True, "message": "Successfully logged out"}


@router.post("/logout-all", response_model=ApiResponse[RevokedCount])
def logout_all(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    revoked = auth_service.logout_all(db, current_user)
    return envelope({"revoked": revoked}, "Logged out from all devices")


@router.post("/refresh", response_model=ApiResponse[TokenData])
def refresh(
    current_token: AuthToken = Depends(get_current_token),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    token, expires_at = auth_service.refresh(db, current_token, current_user)
    return envelope({"token": token, "expires_at": expires_at}, "Token refreshed successfully")


@router.post("/forgot-password", response_model=MessageOnly)
def forgot_password(data: ForgotPasswordRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    issued = auth_service.request_password_reset(db, data.email)
    if issued is not None:
        user, token = issued
        notification_service.queue_password_reset_notification(background_tasks, user, token)
    return {"success": True, "message": RESET_LINK_SENT}


@router.post("/reset-password", response_model=MessageOnly)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    auth_service.reset_password(db, data.email, data.token, data.password)
    return {"success": True, "message": "Password reset successfully"}


@router.post("/change-password", response_model=MessageOnly)
def change_password(
    data: ChangePasswordRequest,
    current_token: AuthToken = Depends(get_current_token),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.change_password(db, current_user, current_token, data.current_password, data.new_password)
    return {"success": True, "message": "Password changed successfully"}


@router.get("/sessions", response_model=ApiResponse[List[SessionOut]])
def list_sessions(
    current_token: AuthToken = Depends(get_current_token),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sessions = [
        SessionOut.model_validate(t).model_copy(update={"current": t.id == current_token.id})
        for t in token_service.active_tokens(db, current_user)
    ]
    return envelope(sessions)


@router.delete("/sessions/{token_id}", response_model=MessageOnly)
def revoke_session(token_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not auth_service.revoke_session(db, current_user, token_id):
        raise NotFoundError("Session not found.")
    return {"success": True, "message": "Session revoked"}
