"""Auth Service 도메인 서비스 레이어입니다. 가입/로그인/로그아웃/토큰 갱신/비밀번호 재설정 흐름을 조합합니다."""

import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.exceptions import InvalidCredentials, InvalidOrExpiredResetToken, InvalidToken, ValidationError
from taskboard.models.auth_token import AuthToken, PasswordResetToken
from taskboard.models.user import User
from taskboard.schemas.user import RegisterRequest
from taskboard.services import token_service, user_service
from taskboard.utils.helpers import sha256_hex, utcnow

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
RESET_PURPOSE = "password_reset"


def register(db: Session, data: RegisterRequest) -> Tuple[User, str, Optional[datetime]]:
    # 사용자 생성과 토큰 발급은 하나의 트랜잭션이다.
    try:
        user = user_service.create_user(db, data.name, data.email, data.password)
        token, expires_at = token_service.issue(db, user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("Registered user_id=%s", user.id)
    return user, token, expires_at


def login(db: Session, email: str, password: str) -> Tuple[User, str, Optional[datetime]]:
    try:
        user = user_service.verify_credentials(db, email, password)
    except InvalidCredentials:
        logger.info("Failed login attempt")
        raise
    token, expires_at = token_service.issue(db, user)
    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)
    return user, token, expires_at


def logout(db: Session, current_token: AuthToken) -> None:
    token_service.revoke_record(db, current_token)
    db.commit()


def logout_all(db: Session, user: User) -> int:
    revoked = token_service.revoke_all(db, user)
    db.commit()
    return revoked


def refresh(db: Session, current_token: AuthToken, user: User) -> Tuple[str, Optional[datetime]]:
    """현재 토큰 폐기 + 새 토큰 발급을 한 트랜잭션으로 처리합니다.

    폐기 DELETE 가 정확히 한 행을 지워야만 새 토큰을 발급하므로 같은 토큰으로
    동시에 두 번 갱신해도 유효한 새 토큰은 하나만 생깁니다.
    """
    try:
        if not token_service.revoke_record(db, current_token):
            raise InvalidToken()
        token, expires_at = token_service.issue(db, user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return token, expires_at


def revoke_session(db: Session, user: User, token_id: int) -> bool:
    revoked = token_service.revoke_by_id(db, user, token_id)
    db.commit()
    return revoked


def _create_reset_jwt(email: str) -> str:
    expire = utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    payload = {
        "sub": email,
        "purpose": RESET_PURPOSE,
        "exp": expire,
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def request_password_reset(db: Session, email: str) -> Optional[Tuple[User, str]]:
    """알려진 이메일이면 (사용자, 재설정 토큰)을 반환하고, 모르는 이메일이면 None.

    라우터는 두 경우 모두 같은 응답을 돌려준다(계정 존재 여부 비노출).
    """
    user = user_service.get_by_email(db, email)
    if user is None:
        return None

    token = _create_reset_jwt(user.email)
    # 이메일당 재설정 토큰은 하나만 유지한다.
    db.query(PasswordResetToken).filter(PasswordResetToken.email == user.email).delete(synchronize_session=False)
    db.add(PasswordResetToken(email=user.email, token_hash=sha256_hex(token), created_at=utcnow()))
    db.commit()
    return user, token


def _validate_reset_token(db: Session, email: str, token: str) -> PasswordResetToken:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise InvalidOrExpiredResetToken()
    if payload.get("purpose") != RESET_PURPOSE or payload.get("sub") != email:
        raise InvalidOrExpiredResetToken()

    row = db.query(PasswordResetToken).filter(PasswordResetToken.email == email).first()
    if row is None or not hmac.compare_digest(row.token_hash, sha256_hex(token)):
        raise InvalidOrExpiredResetToken()
    return row


def reset_password(db: Session, email: str, token: str, new_password: str) -> User:
    normalized = user_service.normalize_email(email)
    row = _validate_reset_token(db, normalized, token)
    user = user_service.get_by_email(db, normalized)
    if user is None:
        raise InvalidOrExpiredResetToken()

    db.delete(row)
    # update_password 가 commit 하면서 재설정 토큰 삭제와 세션 폐기가 함께 반영된다.
    user_service.update_password(db, user, new_password)
    return user


def change_password(
    db: Session,
    user: User,
    current_token: AuthToken,
    current_password: str,
    new_password: str,
) -> int:
    if not user_service.verify_password(current_password, user.password_hash):
        raise ValidationError.for_field("current_password", "The current password is incorrect.")
    # 현재 세션은 유지하고 나머지 기기의 토큰만 폐기한다.
    return user_service.update_password(db, user, new_password, keep_token_id=current_token.id)
