"""Task 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Index, select
from sqlalchemy.orm import column_property, relationship
from sqlalchemy.sql import func
from taskboard.database import Base
from taskboard.models.project import Project

TASK_STATUSES = ("todo", "in_progress", "completed", "cancelled")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")
OPEN_TASK_STATUSES = ("todo", "in_progress")


class Task(Base):
    __tablename__ = "tasks"
    __owner_column__ = "user_id"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="todo")       # todo/in_progress/completed/cancelled
    priority = Column(String(10), nullable=False, default="medium")   # low/medium/high/urgent
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    due_date = Column(Date)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="tasks")
    user = relationship("User", back_populates="tasks")

    __table_args__ = (
        Index("idx_task_user_status", "user_id", "status"),
        Index("idx_task_project", "project_id"),
        Index("idx_task_due_date", "due_date"),
    )


# 목록 조회 시 태스크를 로드하지 않고 SELECT 안의 서브쿼리로 개수를 센다.
Project.tasks_count = column_property(
    select(func.count(Task.id))
    .where(Task.project_id == Project.id)
    .correlate_except(Task)
    .scalar_subquery()
)
