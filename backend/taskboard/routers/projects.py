"""Projects 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.database import get_db
from taskboard.middleware.auth_middleware import get_current_user
from taskboard.models.user import User
from taskboard.schemas.common import ApiResponse, MessageOnly, Page, envelope
from taskboard.schemas.project import ProjectCreate, ProjectDetailOut, ProjectOut, ProjectStatus, ProjectUpdate
from taskboard.services import project_service

router = APIRouter(tags=["projects"])


@router.get("/api/projects", response_model=ApiResponse[Page[ProjectOut]])
def list_projects(
    status: Optional[ProjectStatus] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(project_service.list_projects(db, current_user, status, page, per_page))


@router.post("/api/projects", response_model=ApiResponse[ProjectDetailOut], status_code=201)
def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(project_service.create_project(db, data, current_user), "Project created successfully")


@router.get("/api/projects/{project_id}", response_model=ApiResponse[ProjectDetailOut])
def get_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return envelope(project_service.get_project(db, project_id, current_user))


@router.put("/api/projects/{project_id}", response_model=ApiResponse[ProjectDetailOut])
def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(project_service.update_project(db, project_id, data, current_user), "Project updated successfully")


@router.delete("/api/projects/{project_id}", response_model=MessageOnly)
def delete_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    project_service.delete_project(db, project_id, current_user)
    return {"success": True, "message": "Project deleted successfully"}
