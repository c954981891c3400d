"""Task Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from typing import Optional

from sqlalchemy import false
from sqlalchemy.orm import Session

from taskboard.exceptions import InvalidProjectReference
from taskboard.models.project import Project
from taskboard.models.task import OPEN_TASK_STATUSES, Task
from taskboard.models.user import User
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.services.project_service import projects_of
from taskboard.services.repository import OwnedRepository
from taskboard.utils.helpers import fits_db_int, utcnow, utctoday
from taskboard.utils.permissions import DELETE, UPDATE, VIEW

COMPLETED = "completed"
NULLABLE_FIELDS = ("description", "due_date")


def tasks_of(db: Session, current_user: User) -> OwnedRepository[Task]:
    return OwnedRepository(db, Task, current_user)


def _resolve_owned_project(db: Session, project_id: int, current_user: User) -> Project:
    # 존재하지 않는 프로젝트와 남의 프로젝트를 구분하지 않고 같은 검증 오류로 응답한다.
    project = projects_of(db, current_user).find(project_id)
    if project is None:
        raise InvalidProjectReference()
    return project


def list_tasks(
    db: Session,
    current_user: User,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    project_id: Optional[int] = None,
    overdue: bool = False,
    page: int = 1,
    per_page: Optional[int] = None,
) -> dict:
    repo = tasks_of(db, current_user)
    q = repo.query()
    if status:
        q = q.filter(Task.status == status)
    if priority:
        q = q.filter(Task.priority == priority)
    if project_id is not None:
        q = q.filter(Task.project_id == project_id) if fits_db_int(project_id) else q.filter(false())
    if overdue:
        q = q.filter(Task.due_date < utctoday(), Task.status.in_(OPEN_TASK_STATUSES))
    return repo.paginate(q, page, per_page)


def list_tasks_for_project(
    db: Session,
    project_id: int,
    current_user: User,
    page: int = 1,
    per_page: Optional[int] = None,
) -> dict:
    projects_of(db, current_user).authorize(project_id, VIEW)
    repo = tasks_of(db, current_user)
    return repo.paginate(repo.query().filter(Task.project_id == project_id), page, per_page)


def get_task(db: Session, task_id: int, current_user: User) -> Task:
    return tasks_of(db, current_user).authorize(task_id, VIEW)


def create_task(db: Session, data: TaskCreate, current_user: User) -> Task:
    _resolve_owned_project(db, data.project_id, current_user)
    payload = data.model_dump()
    payload["status"] = payload.get("status") or "todo"
    payload["priority"] = payload.get("priority") or "medium"
    if payload["status"] == COMPLETED:
        payload["completed_at"] = utcnow()

    task = tasks_of(db, current_user).add(Task(**payload))
    db.commit()
    db.refresh(task)
    return task


def apply_status_transition(task: Task, new_status: Optional[str], updates: dict) -> dict:
    """completed 로 들어갈 때만 completed_at 을 찍고, 빠져나갈 때 지운다. 재완료는 원래 시각 유지."""
    if not new_status:
        return updates
    if new_status == COMPLETED and task.status != COMPLETED:
        updates["completed_at"] = utcnow()
    elif new_status != COMPLETED and task.status == COMPLETED:
        updates["completed_at"] = None
    return updates


def update_task(db: Session, task_id: int, data: TaskUpdate, current_user: User) -> Task:
    task = tasks_of(db, current_user).authorize(task_id, UPDATE)

    updates = data.model_dump(exclude_none=True)
    for field in NULLABLE_FIELDS:
        if field in data.model_fields_set:
            updates[field] = getattr(data, field)

    if "project_id" in updates and updates["project_id"] != task.project_id:
        _resolve_owned_project(db, updates["project_id"], current_user)

    updates = apply_status_transition(task, updates.get("status"), updates)

    for k, v in updates.items():
        setattr(task, k, v)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task_id: int, current_user: User):
    task = tasks_of(db, current_user).authorize(task_id, DELETE)
    db.delete(task)
    db.commit()
