"""Project Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from taskboard.exceptions import ValidationError
from taskboard.models.project import Project
from taskboard.models.user import User
from taskboard.schemas.project import ProjectCreate, ProjectUpdate
from taskboard.services.repository import OwnedRepository
from taskboard.utils.permissions import DELETE, UPDATE, VIEW

NULLABLE_FIELDS = ("description", "start_date", "end_date")


def projects_of(db: Session, current_user: User) -> OwnedRepository[Project]:
    return OwnedRepository(db, Project, current_user)


def _validate_date_range(start_date: Optional[date], end_date: Optional[date]):
    if start_date and end_date and end_date < start_date:
        raise ValidationError.for_field("end_date", "The end date must be a date after or equal to the start date.")


def list_projects(
    db: Session,
    current_user: User,
    status: Optional[str] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> dict:
    repo = projects_of(db, current_user)
    q = repo.query()
    if status:
        q = q.filter(Project.status == status)
    return repo.paginate(q, page, per_page)


def get_project(db: Session, project_id: int, current_user: User) -> Project:
    return projects_of(db, current_user).authorize(project_id, VIEW)


def create_project(db: Session, data: ProjectCreate, current_user: User) -> Project:
    payload = data.model_dump()
    payload["status"] = payload.get("status") or "pending"
    _validate_date_range(payload.get("start_date"), payload.get("end_date"))

    project = projects_of(db, current_user).add(Project(**payload))
    db.commit()
    db.refresh(project)
    return project


def update_project(db: Session, project_id: int, data: ProjectUpdate, current_user: User) -> Project:
    project = projects_of(db, current_user).authorize(project_id, UPDATE)

    updates = data.model_dump(exclude_none=True)
    for field in NULLABLE_FIELDS:
        if field in data.model_fields_set:
            updates[field] = getattr(data, field)

    _validate_date_range(
        updates["start_date"] if "start_date" in updates else project.start_date,
        updates["end_date"] if "end_date" in updates else project.end_date,
    )

    for k, v in updates.items():
        setattr(project, k, v)
    db.commit()
    db.refresh(project)
    return project


def delete_project(db: Session, project_id: int, current_user: User):
    project = projects_of(db, current_user).authorize(project_id, DELETE)
    # relationship cascade 로 하위 태스크도 함께 하드 삭제된다.
    db.delete(project)
    db.commit()
