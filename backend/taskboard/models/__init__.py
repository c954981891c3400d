"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from taskboard.models.user import User
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.models.auth_token import AuthToken, PasswordResetToken

__all__ = [
    "User",
    "Project",
    "Task",
    "AuthToken", "PasswordResetToken",
]
