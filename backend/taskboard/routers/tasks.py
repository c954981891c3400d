from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.database import get_db
from taskboard.middleware.auth_middleware import get_current_user
from taskboard.models.user import User
from taskboard.schemas.common import ApiResponse, MessageOnly, Page, envelope
from taskboard.schemas.task import TaskCreate, TaskOut, TaskPriority, TaskStatus, TaskUpdate
from taskboard.services import task_service

router = APIRouter(tags=["tasks"])


@router.get("/api/tasks", response_model=ApiResponse[Page[TaskOut]])
def list_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    project_id: Optional[int] = None,
    overdue: bool = False,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(
        task_service.list_tasks(db, current_user, status, priority, project_id, overdue, page, per_page)
    )


@router.post("/api/tasks", response_model=ApiResponse[TaskOut], status_code=201)
def create_task(data: TaskCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return envelope(task_service.create_task(db, data, current_user), "Task created successfully")


@router.get("/api/projects/{project_id}/tasks", response_model=ApiResponse[Page[TaskOut]])
def list_project_tasks(
    project_id: int,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(task_service.list_tasks_for_project(db, project_id, current_user, page, per_page))


@router.get("/api/tasks/{task_id}", response_model=ApiResponse[TaskOut])
def get_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return envelope(task_service.get_task(db, task_id, current_user))


@router.put("/api/tasks/{task_id}", response_model=ApiResponse[TaskOut])
def update_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(task_service.update_task(db, task_id, data, current_user), "Task updated successfully")


@router.delete("/api/tasks/{task_id}", response_model=MessageOnly)
def delete_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task_service.delete_task(db, task_id, current_user)
    return {"success": True, "message": "Task deleted successfully"}
