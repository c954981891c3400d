"""Bearer 토큰을 현재 사용자로 해석하는 FastAPI 의존성입니다."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.exceptions import AuthenticationError
from taskboard.models.auth_token import AuthToken
from taskboard.models.user import User
from taskboard.services import token_service

# auto_error 를 끄고 401 envelope 을 직접 만든다 (버전에 따라 403 이 나오는 것을 피함).
security = HTTPBearer(auto_error=False)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AuthToken:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return token_service.resolve(db, credentials.credentials)


def get_current_user(token: AuthToken = Depends(get_current_token)) -> User:
    user = token.user
    if user is None:
        raise AuthenticationError()
    return user
