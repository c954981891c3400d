"""모든 API 응답이 공유하는 envelope 과 페이지 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Dict[str, List[str]] = Field(default_factory=dict)


class Page(BaseModel, Generic[T]):
    data: List[T]
    current_page: int
    per_page: int
    total: int
    last_page: int
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None

    model_config = {"populate_by_name": True}


class MessageOnly(BaseModel):
    success: bool = True
    message: str


def envelope(data: Any = None, message: Optional[str] = None) -> dict:
    return {"success": True, "message": message, "data": data}
