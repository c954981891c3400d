"""User Service 도메인 서비스 레이어입니다. 자격 증명 저장과 비밀번호 검증을 캡슐화합니다."""

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.exceptions import ConflictError, InvalidCredentials
from taskboard.models.user import ROLE_USER, ROLES, User
from taskboard.services import token_service

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

DUPLICATE_EMAIL_MESSAGE = "The email has already been taken."

# 존재하지 않는 이메일에도 동일한 해시 검증 비용을 치르기 위한 더미 해시
_DUMMY_HASH = pwd_context.hash("taskboard-dummy-password")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_password(raw_password: str) -> str:
    return pwd_context.hash(raw_password)


def verify_password(raw_password: str, password_hash: str) -> bool:
    return pwd_context.verify(raw_password, password_hash)


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(db: Session, name: str, email: str, raw_password: str, role: str = ROLE_USER) -> User:
    """사용자를 추가하고 flush 까지만 합니다. commit 은 호출자의 트랜잭션 경계에서 합니다."""
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    normalized = normalize_email(email)
    if get_by_email(db, normalized) is not None:
        raise ConflictError.for_field("email", DUPLICATE_EMAIL_MESSAGE)

    user = User(
        name=name.strip(),
        email=normalized,
        password_hash=hash_password(raw_password),
        role=role,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # 동시 가입 경쟁에서 unique 제약이 먼저 걸린 경우
        db.rollback()
        raise ConflictError.for_field("email", DUPLICATE_EMAIL_MESSAGE)
    return user


def verify_credentials(db: Session, email: str, raw_password: str) -> User:
    user = get_by_email(db, email)
    if user is None:
        verify_password(raw_password, _DUMMY_HASH)
        raise InvalidCredentials()
    if not verify_password(raw_password, user.password_hash):
        raise InvalidCredentials()
    return user


def update_password(db: Session, user: User, new_raw_password: str, keep_token_id: Optional[int] = None) -> int:
    """비밀번호를 다시 해시하고 세션을 무효화합니다. 폐기된 토큰 수를 반환합니다."""
    user.password_hash = hash_password(new_raw_password)
    revoked = token_service.revoke_all(db, user, except_id=keep_token_id)
    db.commit()
    logger.info("Password updated for user_id=%s, revoked %s token(s)", user.id, revoked)
    return revoked
