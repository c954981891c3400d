"""Seed the database with demo users, projects and tasks."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta
from taskboard.database import SessionLocal, engine, Base
import taskboard.models  # noqa: F401

from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.models.user import ROLE_ADMIN, ROLE_MANAGER, User
from taskboard.services import user_service
from taskboard.utils.helpers import utcnow

DEMO_PASSWORD = "password123"


def seed(db=None):
    owns_session = db is None
    if owns_session:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return False

        admin = user_service.create_user(db, "Admin User", "admin@example.com", DEMO_PASSWORD, role=ROLE_ADMIN)
        manager = user_service.create_user(db, "Maria Manager", "manager@example.com", DEMO_PASSWORD, role=ROLE_MANAGER)
        member = user_service.create_user(db, "John Doe", "john@example.com", DEMO_PASSWORD)

        today = date.today()
        projects = [
            Project(name="Website relaunch", description="New marketing site", status="active",
                    owner_id=manager.id, start_date=today - timedelta(days=14), end_date=today + timedelta(days=45)),
            Project(name="Mobile app", status="pending", owner_id=member.id,
                    start_date=today, end_date=today + timedelta(days=90)),
            Project(name="Internal tooling", status="completed", owner_id=admin.id),
        ]
        db.add_all(projects)
        db.flush()

        tasks = [
            Task(title="Draft sitemap", status="completed", priority="high", project_id=projects[0].id,
                 user_id=manager.id, due_date=today - timedelta(days=7), completed_at=utcnow()),
            Task(title="Write landing copy", status="in_progress", priority="medium", project_id=projects[0].id,
                 user_id=manager.id, due_date=today - timedelta(days=1)),
            Task(title="Pick analytics vendor", status="todo", priority="low", project_id=projects[0].id,
                 user_id=manager.id, due_date=today + timedelta(days=10)),
            Task(title="Sketch onboarding flow", status="todo", priority="urgent", project_id=projects[1].id,
                 user_id=member.id, due_date=today + timedelta(days=3)),
        ]
        db.add_all(tasks)
        db.commit()
        print(f"Seeded 3 users (password: {DEMO_PASSWORD}), {len(projects)} projects, {len(tasks)} tasks.")
        return True
    except Exception as e:
        db.rollback()
        print(f"Seeding failed: {e}")
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    seed()
