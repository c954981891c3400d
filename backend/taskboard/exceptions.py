"""도메인 서비스가 발생시키는 예외 계층입니다. main.py 의 핸들러가 응답 envelope 로 변환합니다."""

from typing import Dict, List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 422
    default_message = "The given data was invalid."

    @classmethod
    def for_field(cls, field: str, message: str):
        return cls(message, errors={field: [message]})


class ConflictError(ValidationError):
    pass


class InvalidProjectReference(ValidationError):
    def __init__(self, message: str = "The selected project is invalid."):
        super().__init__(message, errors={"project_id": [message]})


class InvalidOrExpiredResetToken(ValidationError):
    def __init__(self, message: str = "This password reset token is invalid or has expired."):
        super().__init__(message, errors={"email": [message]})


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthenticated."


class InvalidCredentials(AuthenticationError):
    default_message = "The provided credentials are incorrect."


class InvalidToken(AuthenticationError):
    pass


class AuthorizationError(AppError):
    status_code = 403
    default_message = "This action is unauthorized."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found."
