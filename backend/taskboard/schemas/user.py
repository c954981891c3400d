"""User / 인증 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from typing import Optional
from datetime import datetime


def _check_confirmation(value: Optional[str], info: ValidationInfo, source: str) -> Optional[str]:
    if value is not None and value != info.data.get(source):
        raise ValueError("The password confirmation does not match.")
    return value


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    password_confirmation: Optional[str] = None

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v, info: ValidationInfo):
        return _check_confirmation(v, info, "password")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=72)
    password_confirmation: Optional[str] = None

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v, info: ValidationInfo):
        return _check_confirmation(v, info, "password")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)
    new_password_confirmation: Optional[str] = None

    @field_validator("new_password_confirmation")
    @classmethod
    def passwords_match(cls, v, info: ValidationInfo):
        return _check_confirmation(v, info, "new_password")


class TokenData(BaseModel):
    token: str
    token_type: str = "Bearer"
    expires_at: Optional[datetime] = None


class AuthData(TokenData):
    user: UserOut


class SessionOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    current: bool = False

    model_config = {"from_attributes": True}


class RevokedCount(BaseModel):
    revoked: int
