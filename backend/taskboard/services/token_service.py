"""Token Service 도메인 서비스 레이어입니다. 불투명(opaque) bearer 토큰의 발급·조회·폐기를 담당합니다.

원문 토큰은 발급 시 한 번만 호출자에게 돌려주고, DB 에는 sha256 해시만
저장합니다. 조회는 해시 컬럼에 대한 단일 인덱스 lookup 입니다.
모든 함수는 flush 까지만 하며 commit 은 호출자가 합니다.
"""

import secrets
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.exceptions import InvalidToken
from taskboard.models.auth_token import AuthToken
from taskboard.models.user import User
from taskboard.utils.helpers import fits_db_int, sha256_hex, utcnow

DEFAULT_TOKEN_NAME = "auth_token"
TOKEN_BYTES = 40


def _expiry_from(now: datetime) -> Optional[datetime]:
    if settings.TOKEN_EXPIRE_MINUTES <= 0:
        return None
    return now + timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)


def purge_expired(db: Session, user: User, now: Optional[datetime] = None) -> int:
    return (
        db.query(AuthToken)
        .filter(AuthToken.user_id == user.id, AuthToken.expires_at <= (now or utcnow()))
        .delete(synchronize_session=False)
    )


def issue(db: Session, user: User, name: str = DEFAULT_TOKEN_NAME) -> Tuple[str, Optional[datetime]]:
    raw_token = secrets.token_urlsafe(TOKEN_BYTES)
    now = utcnow()
    # 만료된 세션은 새 토큰을 발급할 때 함께 정리한다.
    purge_expired(db, user, now)
    record = AuthToken(
        user_id=user.id,
        name=name,
        token_hash=sha256_hex(raw_token),
        created_at=now,
        expires_at=_expiry_from(now),
    )
    db.add(record)
    db.flush()
    return raw_token, record.expires_at


def is_expired(record: AuthToken, now: Optional[datetime] = None) -> bool:
    if record.expires_at is None:
        return False
    return record.expires_at <= (now or utcnow())


def resolve(db: Session, raw_token: str) -> AuthToken:
    if not raw_token:
        raise InvalidToken()
    record = db.query(AuthToken).filter(AuthToken.token_hash == sha256_hex(raw_token)).first()
    if record is None or is_expired(record):
        raise InvalidToken()
    return record


def revoke(db: Session, raw_token: str) -> bool:
    """멱등 폐기. 이미 없거나 모르는 토큰이면 False 를 반환할 뿐 오류가 아니다."""
    deleted = (
        db.query(AuthToken)
        .filter(AuthToken.token_hash == sha256_hex(raw_token or ""))
        .delete(synchronize_session=False)
    )
    return deleted > 0


def revoke_record(db: Session, record: AuthToken) -> bool:
    deleted = db.query(AuthToken).filter(AuthToken.id == record.id).delete(synchronize_session=False)
    return deleted > 0


def revoke_by_id(db: Session, user: User, token_id: int) -> bool:
    if not fits_db_int(token_id):
        return False
    deleted = (
        db.query(AuthToken)
        .filter(AuthToken.id == token_id, AuthToken.user_id == user.id)
        .delete(synchronize_session=False)
    )
    return deleted > 0


def revoke_all(db: Session, user: User, except_id: Optional[int] = None) -> int:
    q = db.query(AuthToken).filter(AuthToken.user_id == user.id)
    if except_id is not None:
        q = q.filter(AuthToken.id != except_id)
    return q.delete(synchronize_session=False)


def active_tokens(db: Session, user: User) -> List[AuthToken]:
    now = utcnow()
    q = db.query(AuthToken).filter(AuthToken.user_id == user.id)
    q = q.filter((AuthToken.expires_at.is_(None)) | (AuthToken.expires_at > now))
    return q.order_by(AuthToken.created_at.desc(), AuthToken.id.desc()).all()
